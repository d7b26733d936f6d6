from apps.common.repository import GenericRepository
from .models import User


class UserRepository(GenericRepository[User]):
    def __init__(self):
        super().__init__(User)
