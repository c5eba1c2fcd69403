from inkwell.database import SessionLocal, engine, Base
from inkwell.auth import get_password_hash
from inkwell.models import ApprovalAction, ApprovalRequest, ApprovalStatus, Post, PostStatus, User

# Create tables
Base.metadata.create_all(bind=engine)

db = SessionLocal()

# Clear existing data
db.query(ApprovalAction).delete()
db.query(ApprovalRequest).delete()
db.query(Post).delete()
db.query(User).delete()

admin = User(
    email="admin@example.com",
    hashed_password=get_password_hash("admin-password"),
    display_name="Admin",
    role="admin",
)
author = User(
    email="author@example.com",
    hashed_password=get_password_hash("author-password"),
    display_name="Author",
    role="author",
)
db.add_all([admin, author])
db.flush()

posts = [
    Post(
        author_id=author.id,
        title="Hello, Inkwell",
        slug="hello-inkwell",
        excerpt="A first post waiting for review.",
        content="Welcome to the blog.",
        status=PostStatus.DRAFT.value,
    ),
    Post(
        author_id=author.id,
        title="Work in progress",
        slug="work-in-progress",
        content="Not submitted yet.",
        status=PostStatus.DRAFT.value,
    ),
]
db.add_all(posts)
db.flush()

db.add(ApprovalRequest(
    post_id=posts[0].id,
    requester_id=author.id,
    status=ApprovalStatus.PENDING.value,
    request_message="Please review",
))
db.commit()

print("Database seeded successfully!")
print("  - 2 users (admin@example.com, author@example.com)")
print(f"  - {len(posts)} draft posts")
print("  - 1 pending approval request")

db.close()
