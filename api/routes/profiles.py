# api/routes/profiles.py

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from bookshelf.sa.database import get_db
from bookshelf.sa.repositories import ProfileRepository
from api.deps import get_actor_id
from api.schemas.profile import Profile, ProfileCreate, ProfileUpdate

router = APIRouter(prefix="/profiles", tags=["profiles"])

@router.post("", response_model=Profile, status_code=status.HTTP_201_CREATED)
def create_profile(
    profile: ProfileCreate,
    actor_id: str = Depends(get_actor_id),
    db: Session = Depends(get_db)
):
    """Create the signed-in user's profile."""
    repo = ProfileRepository(db)
    try:
        return repo.create_profile(user_id=actor_id, **profile.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/me", response_model=Profile)
def get_my_profile(actor_id: str = Depends(get_actor_id), db: Session = Depends(get_db)):
    profile = ProfileRepository(db).get_by_user_id(actor_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile

@router.put("/me", response_model=Profile)
def update_my_profile(
    changes: ProfileUpdate,
    actor_id: str = Depends(get_actor_id),
    db: Session = Depends(get_db)
):
    repo = ProfileRepository(db)
    try:
        profile = repo.update_profile(actor_id, **changes.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile
