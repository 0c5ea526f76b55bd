from .repository import InMemoryRepository, InMemoryStudentRepository

__all__ = ["InMemoryRepository", "InMemoryStudentRepository"]
