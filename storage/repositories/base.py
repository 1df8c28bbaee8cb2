"""
Base Repository Class.

Common session handling and error wrapping for async repositories.
Sessions are injected; repositories never commit on their own.
"""

import logging
from typing import Generic, NoReturn, Optional, Type, TypeVar

from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from storage.models.base import Base
from storage.repositories.exceptions import QueryError, RepositoryConnectionError


T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Usage:
        class MyRepository(BaseRepository[MyModel]):
            def __init__(self, session: AsyncSession):
                super().__init__(session, MyModel, "MyRepository")
    """

    def __init__(
        self,
        session: AsyncSession,
        model_class: Type[T],
        repository_name: str
    ) -> None:
        self._session = session
        self._model_class = model_class
        self._repository_name = repository_name
        self._logger = logging.getLogger(f"repository.{repository_name}")

    @property
    def session(self) -> AsyncSession:
        return self._session

    @property
    def model_class(self) -> Type[T]:
        return self._model_class

    def _handle_db_error(
        self,
        error: Exception,
        operation: str,
        context: Optional[dict] = None
    ) -> NoReturn:
        """
        Wrap a database error in a repository exception.

        Raises:
            RepositoryException: Always
        """
        self._logger.error(
            f"Database error in {operation}: {error}",
            extra={"context": context or {}},
        )
        if isinstance(error, OperationalError):
            raise RepositoryConnectionError(
                repository_name=self._repository_name,
                operation=operation,
                original_error=str(error)
            ) from error
        raise QueryError(
            repository_name=self._repository_name,
            operation=operation,
            original_error=str(error)
        ) from error
