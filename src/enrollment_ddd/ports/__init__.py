from .repository import IRepository, IStudentRepository
from .unit_of_work import UnitOfWork

__all__ = ["IRepository", "IStudentRepository", "UnitOfWork"]
