"""
Доступ к данным: репозиторий на тип сущности + единица работы (unit of work).

Сервисы не знают про сессию SQLAlchemy: они получают ``UnitOfWork``,
берут из него репозитории и фиксируют изменения одним ``save()``.
Всё, что не было сохранено, откатывается при выходе из ``with``.
"""
from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Generic, Hashable, Iterable, Iterator, List, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from errors import PersistenceError
from models import TeacherRegistration, TeacherType

log = logging.getLogger(__name__)

T = TypeVar("T")

# ключ уникальности: entity -> значение (None = ограничение к строке не применяется)
UniqueKey = Callable[[Any], Optional[Hashable]]


class Repository(ABC, Generic[T]):
    @abstractmethod
    def all(self) -> Iterable[T]:
        """Ленивая последовательность всех сущностей, видимых в текущей транзакции."""

    @abstractmethod
    def add(self, entity: T) -> None:
        """Поставить сущность в очередь на вставку."""

    def filter_by(self, **criteria) -> Iterable[T]:
        return (e for e in self.all()
                if all(getattr(e, k) == v for k, v in criteria.items()))

    def first_by(self, **criteria) -> Optional[T]:
        for e in self.filter_by(**criteria):
            return e
        return None


class UnitOfWork(ABC):
    """
    Транзакционная граница одной операции.

    - ``get_repository(model)`` отдаёт репозитории, привязанные к этой транзакции;
    - ``save()`` фиксирует всё атомарно или бросает ``PersistenceError``;
    - при выходе из контекста несохранённое откатывается (в т.ч. при исключении).
    """

    def __init__(self):
        self._repos: Dict[type, Repository] = {}

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.rollback()

    def get_repository(self, model: Type[T]) -> Repository[T]:
        repo = self._repos.get(model)
        if repo is None:
            repo = self._repos[model] = self._make_repository(model)
        return repo

    @abstractmethod
    def _make_repository(self, model: Type[T]) -> Repository[T]: ...

    @abstractmethod
    def save(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...


# ===== SQLAlchemy =====
class SqlAlchemyRepository(Repository[T]):
    def __init__(self, session, model: Type[T]):
        self.session = session
        self.model = model

    def all(self):
        # Query ленивый: SQL уходит только при итерации
        return self.session.query(self.model)

    def add(self, entity: T) -> None:
        self.session.add(entity)

    def filter_by(self, **criteria):
        return self.session.query(self.model).filter_by(**criteria)

    def first_by(self, **criteria) -> Optional[T]:
        return self.filter_by(**criteria).first()


class SqlAlchemyUnitOfWork(UnitOfWork):
    def __init__(self, session=None):
        super().__init__()
        if session is None:
            from extensions import db
            session = db.session
        self.session = session

    def _make_repository(self, model):
        return SqlAlchemyRepository(self.session, model)

    def save(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as ex:
            self.session.rollback()
            log.warning("commit rejected: %s", getattr(ex, "orig", None) or ex)
            raise PersistenceError("commit rejected by storage") from ex

    def rollback(self) -> None:
        self.session.rollback()


# ===== In-memory (тесты, локальные прогоны) =====
class InMemoryRepository(Repository[T]):
    def __init__(self, rows: List[T]):
        self._rows = rows          # общий «committed»-список из InMemoryUnitOfWork
        self.staged: List[T] = []

    def all(self) -> Iterator[T]:
        return iter(list(self._rows))

    def add(self, entity: T) -> None:
        self.staged.append(entity)


def _registration_pair(r) -> Hashable:
    return (r.ssn, r.course_instance_id)

def _registration_main_teacher(r) -> Optional[Hashable]:
    return r.course_instance_id if r.type == TeacherType.MAIN_TEACHER else None

# те же ограничения, что и в схеме БД (models.TeacherRegistration.__table_args__)
DEFAULT_CONSTRAINTS: Dict[type, List[UniqueKey]] = {
    TeacherRegistration: [_registration_pair, _registration_main_teacher],
}


class InMemoryUnitOfWork(UnitOfWork):
    """
    Хранилище на списках. Добавленное видно только после ``save()``;
    нарушение уникального ключа при ``save()`` -> ``PersistenceError``, ничего не применяется.
    """

    def __init__(self, data: Optional[Dict[type, Iterable[Any]]] = None,
                 constraints: Optional[Dict[type, List[UniqueKey]]] = None):
        super().__init__()
        self.store: Dict[type, List[Any]] = {m: list(rows) for m, rows in (data or {}).items()}
        self.constraints = DEFAULT_CONSTRAINTS if constraints is None else constraints
        self.commits = 0

    def _make_repository(self, model):
        return InMemoryRepository(self.store.setdefault(model, []))

    def _check(self, model: type, rows: List[Any]) -> None:
        for key_fn in self.constraints.get(model, []):
            seen = set()
            for row in rows:
                key = key_fn(row)
                if key is None:
                    continue
                if key in seen:
                    raise PersistenceError(f"unique constraint violated on {model.__name__}: {key!r}")
                seen.add(key)

    def save(self) -> None:
        pending = {m: r for m, r in self._repos.items() if r.staged}
        try:
            for model, repo in pending.items():
                self._check(model, self.store[model] + repo.staged)
        except PersistenceError as ex:
            self.rollback()
            log.warning("commit rejected: %s", ex)
            raise
        for model, repo in pending.items():
            self.store[model].extend(repo.staged)
            repo.staged = []
        self.commits += 1

    def rollback(self) -> None:
        for repo in self._repos.values():
            repo.staged = []
