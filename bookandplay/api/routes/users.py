from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from bookandplay.db.session import get_db
from bookandplay.models.user import User
from bookandplay.schemas.user import UserCreate, UserOut

router = APIRouter(prefix="/users", tags=["Users"])


# =====================================================================
# REGISTER USER (identity is issued by the external auth service)
# =====================================================================
@router.post("/", response_model=UserOut)
def create_user(data: UserCreate, db: Session = Depends(get_db)):
    if db.query(User).filter(User.email == data.email).first():
        raise HTTPException(status_code=400, detail="User already exists")

    user = User(
        name=data.name,
        email=data.email,
        phone_number=data.phone_number,
        user_type=data.user_type,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    return user


# =====================================================================
# USER DETAILS
# =====================================================================
@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
