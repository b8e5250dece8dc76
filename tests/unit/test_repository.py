"""Unit tests for the Repository base class."""

from __future__ import annotations

from typing import Annotated
from unittest.mock import MagicMock

import pytest

from row_bind.core.exceptions import EmptyResultError, MultipleRowsError
from row_bind.mapping.annotations import Column, entity
from row_bind.mapping.decoder import RowDecoder
from row_bind.repository.base import Repository, head


@entity
class User:
    id: Annotated[int, Column("id")] = 0
    name: Annotated[str | None, Column("name")] = None


@entity
class Order:
    id: Annotated[int, Column("id")] = 0


class TestHead:
    def test_first_element(self) -> None:
        assert head([3, 4]) == 3
        assert head(iter("ab")) == "a"

    def test_empty_raises(self) -> None:
        with pytest.raises(EmptyResultError, match="SELECT 1"):
            head([], "SELECT 1")


class TestRepository:
    def test_engine_attribute(self) -> None:
        engine = MagicMock()
        repo = Repository(engine=engine)
        assert repo.engine is engine
        assert repo.mapper is None

    def test_mapper_from_target_class(self) -> None:
        repo = Repository(engine=MagicMock(), target_class=User)
        assert isinstance(repo.mapper, RowDecoder)
        assert repo.mapper.target_class is User

    def test_explicit_mapper_wins(self) -> None:
        mapper = RowDecoder(Order)
        repo = Repository(engine=MagicMock(), target_class=User, mapper=mapper)
        assert repo.mapper is mapper

    def test_load_list_delegates_to_engine(self) -> None:
        engine = MagicMock()
        engine.fetch_all.return_value = [User()]
        repo = Repository(engine=engine, target_class=User)

        result = repo.load_list("SELECT id FROM users", {"x": 1})

        engine.fetch_all.assert_called_once_with(
            "SELECT id FROM users", {"x": 1}, mapper=repo.mapper, column_types=None
        )
        assert len(result) == 1

    def test_load_list_with_other_target(self) -> None:
        engine = MagicMock()
        engine.fetch_all.return_value = []
        repo = Repository(engine=engine, target_class=User)

        repo.load_list("SELECT id FROM orders", target_class=Order)

        mapper = engine.fetch_all.call_args.kwargs["mapper"]
        assert mapper.target_class is Order

    def test_load_list_without_target_raises(self) -> None:
        repo = Repository(engine=MagicMock())
        with pytest.raises(TypeError, match="target_class"):
            repo.load_list("SELECT 1")

    def test_load_object_empty(self) -> None:
        engine = MagicMock()
        engine.fetch_all.return_value = []
        repo = Repository(engine=engine, target_class=User)
        with pytest.raises(EmptyResultError):
            repo.load_object("SELECT id FROM users WHERE 0")

    def test_scalar_column_and_execute_delegate(self) -> None:
        engine = MagicMock()
        engine.fetch_column.side_effect = [[5], [1, 2]]
        engine.execute.return_value = 3
        repo = Repository(engine=engine)

        assert repo.load_scalar("SELECT COUNT(*) FROM t") == 5
        assert repo.load_column("SELECT id FROM t") == [1, 2]
        assert repo.execute("DELETE FROM t") == 3
        engine.execute.assert_called_once_with("DELETE FROM t", None)

    def test_load_scalar_empty_raises(self) -> None:
        engine = MagicMock()
        engine.fetch_column.return_value = []
        repo = Repository(engine=engine)
        with pytest.raises(EmptyResultError, match="SELECT x FROM t"):
            repo.load_scalar("SELECT x FROM t")

    def test_load_scalar_multiple_rows_raises(self) -> None:
        engine = MagicMock()
        engine.fetch_column.return_value = [1, 2]
        repo = Repository(engine=engine)
        with pytest.raises(MultipleRowsError):
            repo.load_scalar("SELECT x FROM t")

    def test_load_scalar_null_value_is_returned(self) -> None:
        engine = MagicMock()
        engine.fetch_column.return_value = [None]
        assert Repository(engine=engine).load_scalar("SELECT NULL") is None

    def test_subclass_queries(self) -> None:
        engine = MagicMock()
        engine.fetch_all.return_value = [{"id": 1, "name": "Alice"}]

        class UserRepo(Repository[User]):
            def raw_by_name(self, name: str) -> dict:
                return self.load_row("SELECT * FROM users WHERE name = :name", {"name": name})

        repo = UserRepo(engine=engine, target_class=User)
        assert repo.raw_by_name("Alice") == {"id": 1, "name": "Alice"}
        engine.fetch_all.assert_called_once_with(
            "SELECT * FROM users WHERE name = :name", {"name": "Alice"}
        )
