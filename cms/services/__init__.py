# Services package.
#
# Each module exposes a focused set of async functions that enforce the
# business rules for one domain aggregate and delegate storage to the
# matching repository module:
#
#   auth_service      — registration, credentials login, password reset
#   user_service      — user CRUD, status toggle, password changes
#   category_service  — category CRUD + slug rules
#   article_service   — article CRUD + slug rules + publish toggle
#   resource_service  — resource metadata, file moves, uploads
#
# All service functions accept an AsyncSession as their first argument
# so that the router layer controls the transaction boundary via the
# ``get_db`` dependency. Rule violations raise ``cms.exceptions`` errors.
