# routes/auth.py
from fastapi import HTTPException, Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
import os
from dotenv import load_dotenv
import logging

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

load_dotenv()
JWT_SECRET = os.getenv("JWT_SECRET", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

# Tokens are issued by the classroom backend; the portal only verifies them.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")

VALID_ROLES = {"teacher", "student"}

async def get_current_user(token: str = Depends(oauth2_scheme)):
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.error(f"JWTError: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid token")
    user_id = payload.get("id") or payload.get("sub")
    role = payload.get("role")
    if not user_id or role not in VALID_ROLES:
        logger.error("Invalid token: Missing user id or role")
        raise HTTPException(status_code=401, detail="Invalid token")
    return {"id": user_id, "role": role, "name": payload.get("name", ""), "token": token}

def require_role(role: str):
    async def check_role(current_user: dict = Depends(get_current_user)):
        if current_user["role"] != role:
            logger.warning(f"User {current_user['id']} with role {current_user['role']} denied {role} view")
            raise HTTPException(status_code=403, detail=f"Only {role}s can access this page")
        return current_user
    return check_role

require_teacher = require_role("teacher")
require_student = require_role("student")
