"""Issue ID generation with collision detection"""

import random
import string
import time

from sqlalchemy.orm import Session

from ..models import Issue

def generate_random_string(length: int = 4) -> str:
    """Generate random alphanumeric string"""
    # Use lowercase letters and numbers for readability
    chars = string.ascii_lowercase + string.digits
    return ''.join(random.choice(chars) for _ in range(length))

def issue_exists(session: Session, issue_id: str) -> bool:
    """Check if issue ID already exists"""
    return session.get(Issue, issue_id) is not None

def generate_issue_id(session: Session, prefix: str = "ep") -> str:
    """Generate unique issue ID with collision detection"""
    # Try up to 10 times to generate a unique ID
    for _ in range(10):
        candidate_id = f"{prefix}-{generate_random_string(4)}"
        if not issue_exists(session, candidate_id):
            return candidate_id
    
    # If we still have collisions after 10 tries, use a longer suffix
    candidate_id = f"{prefix}-{generate_random_string(8)}"
    
    if issue_exists(session, candidate_id):
        # Last resort: add timestamp
        timestamp = str(int(time.time()))[-4:]
        candidate_id = f"{candidate_id}-{timestamp}"
    
    return candidate_id
