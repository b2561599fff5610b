"""
seed_posts.py - fill a store with sample blog posts (and optionally a user)

Usage:
  python seed_posts.py --backend mongo --database-url mongodb://localhost/test-blog-app --count 10
  python seed_posts.py --username testboy --password AliensExist --first-name Test --last-name Boy
"""
import argparse
import random
import time
from datetime import datetime, timezone

from blog_platform.config import settings
from blog_platform.errors import UsernameTakenError
from blog_platform.manager.blog_manager import BlogManager
from blog_platform.models import Author, BlogPost
from blog_platform.schemas import RegisterUserCommand
from blog_platform.storage.storage_factory import get_storage

FIRST_NAMES = ["Ada", "Grace", "Alan", "Linus", "Barbara", "Ken", "Margaret", "Dennis"]
LAST_NAMES = ["Lovelace", "Hopper", "Turing", "Torvalds", "Liskov", "Thompson", "Hamilton", "Ritchie"]
WORDS = ("lorem ipsum dolor sit amet consectetur adipiscing elit sed do eiusmod "
         "tempor incididunt ut labore et dolore magna aliqua").split()


def now_iso():
    return datetime.now(timezone.utc).isoformat()


def sentence(n_words: int) -> str:
    text = " ".join(random.choice(WORDS) for _ in range(n_words))
    return text.capitalize() + "."


def sample_post() -> BlogPost:
    return BlogPost(
        author=Author(first_name=random.choice(FIRST_NAMES), last_name=random.choice(LAST_NAMES)),
        title=sentence(random.randint(3, 8)),
        content=" ".join(sentence(random.randint(6, 14)) for _ in range(random.randint(2, 5))),
    )


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--backend", default=None, help="memory, mongo or postgres (default: env)")
    ap.add_argument("--database-url", default=settings.TEST_DATABASE_URL)
    ap.add_argument("--count", type=int, default=10, help="posts to insert")
    ap.add_argument("--username", default=None, help="also register this user")
    ap.add_argument("--password", default=None)
    ap.add_argument("--first-name", default="")
    ap.add_argument("--last-name", default="")
    args = ap.parse_args()
    if args.username and not args.password:
        ap.error("--password is required with --username")

    start_iso = now_iso()
    t0 = time.perf_counter()

    stores = get_storage(args.backend, database_url=args.database_url)
    try:
        if args.username:
            manager = BlogManager(users=stores.users, posts=stores.posts)
            try:
                manager.register_user(RegisterUserCommand(
                    username=args.username,
                    password=args.password,
                    first_name=args.first_name,
                    last_name=args.last_name,
                ))
                print(f"USER:  {args.username} created")
            except UsernameTakenError:
                print(f"USER:  {args.username} already exists")

        ok = 0
        for _ in range(args.count):
            stores.posts.create(sample_post())
            ok += 1
    finally:
        stores.close()

    dt = time.perf_counter() - t0
    print(f"START: {start_iso}")
    print(f"END:   {now_iso()}")
    print(f"TOTAL: {dt:.3f} s")
    print(f"INSERTED: {ok}/{args.count} posts")


if __name__ == "__main__":
    main()
