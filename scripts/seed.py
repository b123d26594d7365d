"""Database seeder: an admin account plus demo categories and articles."""
import argparse
import asyncio
import time

from cms.database import Base, async_session, engine
from cms.models import Article, ArticleCategory, User, utcnow
from cms.security import hash_password

CATEGORIES = [
    ("技术", "Technology", "technology"),
    ("产品", "Product", "product"),
    ("公司新闻", "Company News", "company-news"),
    ("教程", "Tutorials", "tutorials"),
]


async def seed(
    admin_email: str,
    admin_password: str,
    articles_per_category: int = 3,
    reset: bool = False,
):
    print(f"Seeding: admin {admin_email}, {len(CATEGORIES)} categories, "
          f"{len(CATEGORIES) * articles_per_category} articles")
    start = time.perf_counter()

    async with engine.begin() as conn:
        if reset:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        admin = User(name="Admin", email=admin_email, password=hash_password(admin_password))
        session.add(admin)
        await session.flush()
        print(f"  Created admin {admin.email}")

        categories = []
        for index, (name_zh, name_en, slug) in enumerate(CATEGORIES):
            category = ArticleCategory(
                name_zh=name_zh,
                name_en=name_en,
                slug=slug,
                description_zh=f"{name_zh}相关文章",
                description_en=f"Articles about {name_en.lower()}",
                sort_order=str(index),
            )
            session.add(category)
            categories.append(category)
        await session.flush()
        print(f"  Created {len(categories)} categories")

        total = 0
        for category in categories:
            for i in range(articles_per_category):
                # Every third article stays a draft
                published = i % 3 != 2
                session.add(Article(
                    title_zh=f"{category.name_zh}文章 {i + 1}",
                    title_en=f"{category.name_en} article {i + 1}",
                    content_zh=f"<p>这是{category.name_zh}分类下的第 {i + 1} 篇文章。</p>",
                    content_en=f"<p>Article {i + 1} in the {category.name_en} category.</p>",
                    slug=f"{category.slug}-article-{i + 1}",
                    category_id=category.id,
                    author_id=admin.id,
                    is_published=published,
                    published_at=utcnow() if published else None,
                    meta_title_en=f"{category.name_en} article {i + 1}",
                ))
                total += 1
        await session.commit()

    elapsed = time.perf_counter() - start
    print(f"\nSeeding complete in {elapsed:.1f}s")
    print(f"  Articles: {total}")


def main():
    parser = argparse.ArgumentParser(description="Seed the CMS database")
    parser.add_argument("--admin-email", default="admin@example.com")
    parser.add_argument("--admin-password", default="admin123")
    parser.add_argument("--articles", type=int, default=3, help="Articles per category")
    parser.add_argument("--reset", action="store_true", help="Drop all tables first")
    args = parser.parse_args()
    asyncio.run(seed(args.admin_email, args.admin_password, args.articles, args.reset))


if __name__ == "__main__":
    main()
