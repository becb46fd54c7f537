from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from bookshelf.sa.models import Profile

class ProfileRepository:
    """Repository for managing Profile entities."""

    def __init__(self, session: Session):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_user_id(self, user_id: str) -> Optional[Profile]:
        """Get a profile by the authenticated user's identifier.

        Args:
            user_id: The user identifier supplied by authentication

        Returns:
            The Profile object if found, None otherwise
        """
        return self.session.query(Profile).filter(Profile.user_id == user_id).one_or_none()

    def create_profile(
        self,
        user_id: str,
        full_name: str,
        email: str,
        location: Optional[str] = None,
        bio: Optional[str] = None,
        avatar_url: Optional[str] = None
    ) -> Profile:
        """Create the profile for a user.

        Args:
            user_id: The user identifier supplied by authentication
            full_name: Display name
            email: Contact email
            location: Optional location shown on browse listings
            bio: Optional free text
            avatar_url: Optional avatar image URL

        Returns:
            The created Profile object

        Raises:
            ValueError: If the user already has a profile or a required field is blank
        """
        if not user_id or not user_id.strip():
            raise ValueError("user_id is required")
        if not full_name or not full_name.strip():
            raise ValueError("full_name is required")
        if not email or not email.strip():
            raise ValueError("email is required")

        if self.get_by_user_id(user_id):
            raise ValueError(f"Profile for user '{user_id}' already exists")

        profile = Profile(
            user_id=user_id,
            full_name=full_name.strip(),
            email=email.strip(),
            location=location,
            bio=bio,
            avatar_url=avatar_url
        )
        self.session.add(profile)
        try:
            self.session.commit()
            return profile
        except IntegrityError:
            self.session.rollback()
            raise ValueError(f"Profile for user '{user_id}' already exists")

    def update_profile(
        self,
        user_id: str,
        full_name: Optional[str] = None,
        email: Optional[str] = None,
        location: Optional[str] = None,
        bio: Optional[str] = None,
        avatar_url: Optional[str] = None
    ) -> Optional[Profile]:
        """Update a user's own profile.

        Args:
            user_id: The user identifier supplied by authentication
            full_name: Optional new display name
            email: Optional new email
            location: Optional new location
            bio: Optional new bio
            avatar_url: Optional new avatar URL

        Returns:
            The updated Profile object if found, None otherwise

        Raises:
            ValueError: If full_name or email is given but blank
        """
        profile = self.get_by_user_id(user_id)
        if not profile:
            return None

        if full_name is not None:
            if not full_name.strip():
                raise ValueError("full_name cannot be blank")
            profile.full_name = full_name.strip()
        if email is not None:
            if not email.strip():
                raise ValueError("email cannot be blank")
            profile.email = email.strip()
        if location is not None:
            profile.location = location
        if bio is not None:
            profile.bio = bio
        if avatar_url is not None:
            profile.avatar_url = avatar_url

        self.session.commit()
        return profile
