from sqlalchemy.orm import Session
from typing import Optional
import logging
import os

from app.models.profile import Profile, UserRole

logger = logging.getLogger(__name__)


def ensure_admin_profile(
    db: Session, profile_id: str, email: str, full_name: Optional[str] = None
) -> Profile:
    """
    Create the operator's profile, or promote an existing one to admin.

    The identity itself lives in the auth provider; ``profile_id`` must be the
    ``sub`` of the tokens it issues for that account.
    """
    profile = db.query(Profile).filter(Profile.id == profile_id).first()
    if profile is None:
        profile = Profile(id=profile_id, email=email, full_name=full_name, role=UserRole.ADMIN)
        db.add(profile)
        logger.info(f"Admin profile created: {email}")
    elif profile.role != UserRole.ADMIN:
        logger.info(f"Promoting {profile.email} from {profile.role.value} to admin")
        profile.role = UserRole.ADMIN
    else:
        logger.info(f"{profile.email} is already an admin")

    db.commit()
    db.refresh(profile)
    return profile


if __name__ == "__main__":
    from dotenv import load_dotenv
    from app.database import SessionLocal
    import app.models  # noqa: F401

    load_dotenv()
    logging.basicConfig(level=logging.INFO)

    db = SessionLocal()
    try:
        ensure_admin_profile(
            db,
            profile_id=os.environ["ADMIN_PROFILE_ID"],
            email=os.environ["ADMIN_EMAIL"],
            full_name=os.getenv("ADMIN_FULL_NAME"),
        )
    finally:
        db.close()
