"""
Seed script: superadmin bootstrap, preset custom roles and the tag/skill catalogs.

Every step is idempotent, so the script can be re-run after each deploy.
The superadmin comes from the environment:

    SUPERADMIN_GITHUB_ID, SUPERADMIN_USERNAME, SUPERADMIN_EMAIL (required)
    SUPERADMIN_AVATAR_URL, SUPERADMIN_GITHUB_URL (optional)

Usage:
    python -m scripts.seed
"""
import asyncio
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from codeclub.core import config
from codeclub.core.database.engine import AsyncSessionLocal, close_db, init_db
from codeclub.features.members.models import Member
from codeclub.features.permissions.models import Permission, UserRole
from codeclub.features.roles.service import RoleService
from codeclub.features.skills.models import Skill
from codeclub.features.tags.models import Tag
from codeclub.features.users.models import User
from codeclub.features.users.schemas import GitHubIdentity
from codeclub.features.users.service import upsert_github_user
from codeclub.utils import get_logger


log = get_logger(__name__)


ROLE_PRESETS = {
    "Moderator": {
        "description": "Reviews new members and project submissions",
        "color": "#3B82F6",
        "permissions": [
            Permission.VIEW_DASHBOARD,
            Permission.MANAGE_MEMBERS,
            Permission.MANAGE_PROJECTS,
        ],
    },
    "Content Manager": {
        "description": "Curates projects, events and tags",
        "color": "#8B5CF6",
        "permissions": [
            Permission.VIEW_DASHBOARD,
            Permission.MANAGE_PROJECTS,
            Permission.MANAGE_EVENTS,
            Permission.MANAGE_TAGS,
        ],
    },
    "Project Reviewer": {
        "description": "Approves or removes submitted projects",
        "color": "#10B981",
        "permissions": [
            Permission.VIEW_DASHBOARD,
            Permission.MANAGE_PROJECTS,
        ],
    },
    "Event Coordinator": {
        "description": "Plans and features club events",
        "color": "#F59E0B",
        "permissions": [
            Permission.VIEW_DASHBOARD,
            Permission.MANAGE_EVENTS,
        ],
    },
    "Tech Lead": {
        "description": "Maintains the skill and tag catalogs and reviews projects",
        "color": "#EF4444",
        "permissions": [
            Permission.VIEW_DASHBOARD,
            Permission.MANAGE_PROJECTS,
            Permission.MANAGE_SKILLS,
            Permission.MANAGE_TAGS,
        ],
    },
    "Community Manager": {
        "description": "Onboards members and runs events",
        "color": "#EC4899",
        "permissions": [
            Permission.VIEW_DASHBOARD,
            Permission.MANAGE_MEMBERS,
            Permission.MANAGE_EVENTS,
        ],
    },
}


DEFAULT_TAGS = [
    "Web Development",
    "Mobile App",
    "Desktop App",
    "Game Development",
    "Machine Learning",
    "Artificial Intelligence",
    "Deep Learning",
    "Data Science",
    "Open Source",
    "Portfolio",
    "Hackathon Project",
    "Research Project",
    "Final Year Project",
    "Automation",
    "API Development",
    "UI/UX Design",
    "Fullstack",
    "Frontend",
    "Backend",
    "Cloud",
    "DevOps",
    "Cybersecurity",
    "Competitive Programming",
    "Embedded Systems",
    "Blockchain",
    "IoT",
    "AR/VR",
    "Software Tool",
    "Productivity",
    "Utility",
    "Plugin / Extension",
    "CLI Tool",
    "Educational Project",
    "Club Project",
    "Collaboration",
]


DEFAULT_SKILLS = [
    ("C", "Language"),
    ("C++", "Language"),
    ("Java", "Language"),
    ("Python", "Language"),
    ("JavaScript", "Language"),
    ("TypeScript", "Language"),
    ("Go", "Language"),
    ("Rust", "Language"),
    ("Kotlin", "Language"),
    ("Swift", "Language"),
    ("PHP", "Language"),
    ("SQL", "Language"),
    ("R", "Language"),
    ("Bash", "Language"),
    ("React", "Framework"),
    ("Next.js", "Framework"),
    ("Vue.js", "Framework"),
    ("Nuxt.js", "Framework"),
    ("Angular", "Framework"),
    ("Svelte", "Framework"),
    ("Node.js", "Backend Framework"),
    ("Express.js", "Backend Framework"),
    ("NestJS", "Backend Framework"),
    ("Django", "Backend Framework"),
    ("Flask", "Backend Framework"),
    ("Spring Boot", "Backend Framework"),
    ("FastAPI", "Backend Framework"),
    ("Laravel", "Backend Framework"),
    ("Ruby on Rails", "Backend Framework"),
    ("React Native", "Mobile"),
    ("Flutter", "Mobile"),
    ("Android Studio", "Mobile"),
    ("SwiftUI", "Mobile"),
    ("PostgreSQL", "Database"),
    ("MySQL", "Database"),
    ("SQLite", "Database"),
    ("MongoDB", "Database"),
    ("Redis", "Database"),
    ("Firebase", "Database"),
    ("Supabase", "Database"),
    ("Prisma ORM", "ORM"),
    ("Drizzle ORM", "ORM"),
    ("Sequelize", "ORM"),
    ("Docker", "DevOps"),
    ("Kubernetes", "DevOps"),
    ("AWS", "Cloud"),
    ("Azure", "Cloud"),
    ("Google Cloud", "Cloud"),
    ("Vercel", "Cloud"),
    ("Netlify", "Cloud"),
    ("CI/CD", "DevOps"),
    ("GitHub Actions", "DevOps"),
    ("TensorFlow", "AI/ML"),
    ("PyTorch", "AI/ML"),
    ("Keras", "AI/ML"),
    ("Scikit-learn", "AI/ML"),
    ("Pandas", "Data"),
    ("NumPy", "Data"),
    ("Matplotlib", "Data"),
    ("OpenCV", "AI/ML"),
    ("NLTK", "AI/ML"),
    ("LangChain", "AI/ML"),
    ("OpenAI API", "AI/ML"),
    ("Figma", "Design"),
    ("Adobe XD", "Design"),
    ("Canva", "Design"),
    ("Tailwind CSS", "UI"),
    ("Bootstrap", "UI"),
    ("Framer Motion", "UI"),
    ("ShadCN/UI", "UI"),
    ("Git", "Tool"),
    ("GitHub", "Tool"),
    ("VS Code", "Tool"),
    ("Jira", "Tool"),
    ("Notion", "Tool"),
    ("Postman", "Tool"),
    ("Linux", "Tool"),
    ("Penetration Testing", "Cybersecurity"),
    ("Ethical Hacking", "Cybersecurity"),
    ("Blockchain", "Emerging Tech"),
    ("Solidity", "Emerging Tech"),
    ("Raspberry Pi", "IoT"),
    ("Arduino", "IoT"),
    ("Unity", "Game Dev"),
    ("Unreal Engine", "Game Dev"),
]


def superadmin_identity_from_env() -> GitHubIdentity | None:
    """
    Build the superadmin identity from ``SUPERADMIN_*`` settings.

    Returns:
        None if a required variable is missing
    """
    github_id = config.SUPERADMIN_GITHUB_ID
    username = config.SUPERADMIN_USERNAME
    email = config.SUPERADMIN_EMAIL
    if not (github_id and username and email):
        return None

    return GitHubIdentity(
        github_id=github_id,
        username=username,
        email=email,
        avatar_url=config.SUPERADMIN_AVATAR_URL,
        github_url=config.SUPERADMIN_GITHUB_URL or f"https://github.com/{username}",
    )


async def bootstrap_superadmin(db: AsyncSession, identity: GitHubIdentity) -> User:
    """Make sure ``identity`` is an active ADMIN lead with a Member Profile."""
    user, created = await upsert_github_user(
        db, identity, role=UserRole.ADMIN, is_active=True, is_lead=True
    )
    if not created:
        user.role = UserRole.ADMIN
        user.is_active = True
        user.is_lead = True
        if user.member is None:
            user.member = Member(full_name=identity.name or identity.username)
        await db.commit()
        await db.refresh(user)

    log.info(f"Superadmin {user.username} ({user.id}) {'created' if created else 'updated'}")
    return user


async def seed_role_presets(db: AsyncSession, created_by_id: str | None = None) -> dict[str, int]:
    """
    Upsert every preset role by name.

    Returns:
        {"created": n, "updated": m}
    """
    service = RoleService(db)
    counts = {"created": 0, "updated": 0}

    for name, preset in ROLE_PRESETS.items():
        _role, created = await service.ensure_role(
            name=name,
            description=preset["description"],
            color=preset["color"],
            permissions=preset["permissions"],
            created_by_id=created_by_id,
        )
        counts["created" if created else "updated"] += 1
        log.debug(f"Role preset {name!r} {'created' if created else 'updated'}")

    log.info(f"Role presets: {counts['created']} created, {counts['updated']} updated")
    return counts


async def seed_tags(db: AsyncSession) -> int:
    """Insert the default tags; existing names are skipped. Returns the number created."""
    created = 0
    for name in DEFAULT_TAGS:
        db.add(Tag(name=name))
        try:
            await db.commit()
            created += 1
        except IntegrityError:
            await db.rollback()
            log.debug(f"Tag {name!r} already exists, skipping")
    return created


async def seed_skills(db: AsyncSession) -> int:
    """Insert the default skills; existing names are skipped. Returns the number created."""
    created = 0
    for name, category in DEFAULT_SKILLS:
        db.add(Skill(name=name, category=category))
        try:
            await db.commit()
            created += 1
        except IntegrityError:
            await db.rollback()
            log.debug(f"Skill {name!r} already exists, skipping")
    return created


async def seed(db: AsyncSession) -> None:
    admin_id = None
    identity = superadmin_identity_from_env()
    if identity is None:
        log.warning("SUPERADMIN_GITHUB_ID, SUPERADMIN_USERNAME or SUPERADMIN_EMAIL not set, skipping superadmin")
    else:
        admin = await bootstrap_superadmin(db, identity)
        admin_id = admin.id

    await seed_role_presets(db, created_by_id=admin_id)

    tags = await seed_tags(db)
    skills = await seed_skills(db)
    log.info(f"Seeded {tags} new tags and {skills} new skills")


async def main():
    """Create tables and seed the database."""
    log.info("Starting seeding...")
    await init_db()

    async with AsyncSessionLocal() as db:
        try:
            await seed(db)
        except Exception as e:
            log.error(f"Error seeding database: {e}", exc_info=True)
            await db.rollback()
            raise

    await close_db()
    log.info("Seeding completed successfully!")


if __name__ == "__main__":
    asyncio.run(main())
