# Repositories package.
#
# One module per table, each a set of async functions that take the
# request's AsyncSession first and return ORM rows (or ``(rows, total)``
# for list pages). Repositories never raise domain errors and never
# commit; they only flush so generated values are visible to the caller.
#
#   user_repository            — users
#   category_repository        — article_categories
#   article_repository         — articles (+ category name join)
#   resource_repository        — resources
#   password_reset_repository  — password_reset_tokens
