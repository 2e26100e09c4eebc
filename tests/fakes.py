"""
In-memory stand-in for the parts of the Supabase client photoshelf uses.

Supports the PostgREST query chain (select/gte/lt/eq/order/insert/delete/
execute), Storage buckets (upload/download/get_public_url/remove) and
password auth with session-change callbacks. Failures can be injected per
operation or per storage path.
"""

import itertools
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


class FakeBackendError(Exception):
    """Raised where the real client would raise an API error."""


def _parse(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    return value


@dataclass
class FakeResponse:
    data: list[dict[str, Any]]


class FakeQuery:
    def __init__(self, table: "FakeTable") -> None:
        self.table = table
        self.columns = "*"
        self.filters: list[tuple[str, str, Any]] = []
        self.order_by: tuple[str, bool] | None = None
        self.mode = "select"
        self.payload: dict[str, Any] | None = None

    def select(self, columns: str = "*") -> "FakeQuery":
        self.mode = "select"
        self.columns = columns
        return self

    def insert(self, row: dict[str, Any]) -> "FakeQuery":
        self.mode = "insert"
        self.payload = row
        return self

    def delete(self) -> "FakeQuery":
        self.mode = "delete"
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(("eq", column, value))
        return self

    def gte(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(("gte", column, value))
        return self

    def lt(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(("lt", column, value))
        return self

    def lte(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(("lte", column, value))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self.order_by = (column, desc)
        return self

    def _matches(self, row: dict[str, Any]) -> bool:
        for op, column, value in self.filters:
            left, right = _parse(row.get(column)), _parse(value)
            if op == "eq" and not left == right:
                return False
            if op == "gte" and not left >= right:
                return False
            if op == "lt" and not left < right:
                return False
            if op == "lte" and not left <= right:
                return False
        return True

    def execute(self) -> FakeResponse:
        self.table.calls.append(self.mode)
        if self.mode in self.table.fail_on:
            raise FakeBackendError(f"{self.mode} on {self.table.name} failed")

        if self.mode == "insert":
            return FakeResponse([self.table.add_row(dict(self.payload or {}))])

        if self.mode == "delete":
            removed = [row for row in self.table.rows if self._matches(row)]
            self.table.rows = [row for row in self.table.rows if not self._matches(row)]
            return FakeResponse(removed)

        rows = [row for row in self.table.rows if self._matches(row)]
        if self.order_by:
            column, desc = self.order_by
            rows.sort(key=lambda row: _parse(row[column]), reverse=desc)
        if self.columns != "*":
            wanted = [c.strip() for c in self.columns.split(",")]
            rows = [{c: row.get(c) for c in wanted} for row in rows]
        return FakeResponse([dict(row) for row in rows])


@dataclass
class FakeTable:
    name: str
    rows: list[dict[str, Any]] = field(default_factory=list)
    fail_on: set[str] = field(default_factory=set)
    calls: list[str] = field(default_factory=list)
    clock: Any = None
    _ids: Any = field(default_factory=lambda: itertools.count(1))

    def add_row(self, row: dict[str, Any]) -> dict[str, Any]:
        row.setdefault("id", next(self._ids))
        if "created_at" not in row:
            now = self.clock() if self.clock else datetime.now(UTC)
            row["created_at"] = now.astimezone(UTC).isoformat()
        self.rows.append(row)
        return dict(row)


@dataclass
class FakeBucket:
    name: str
    objects: dict[str, bytes] = field(default_factory=dict)
    options: dict[str, dict[str, Any]] = field(default_factory=dict)
    failing_paths: set[str] = field(default_factory=set)
    fail_on: set[str] = field(default_factory=set)
    calls: list[tuple[str, Any]] = field(default_factory=list)

    def download(self, path: str) -> bytes:
        self.calls.append(("download", path))
        if "download" in self.fail_on or path in self.failing_paths:
            raise FakeBackendError(f"download of {path} failed")
        if path not in self.objects:
            raise FakeBackendError("Object not found")
        return self.objects[path]

    def upload(self, path: str, file: bytes, file_options: dict[str, Any] | None = None) -> dict[str, Any]:
        self.calls.append(("upload", path))
        file_options = file_options or {}
        if "upload" in self.fail_on or path in self.failing_paths:
            raise FakeBackendError(f"upload of {path} failed")
        if path in self.objects and file_options.get("upsert") != "true":
            raise FakeBackendError("The resource already exists")
        self.objects[path] = bytes(file)
        self.options[path] = file_options
        return {"path": path}

    def get_public_url(self, path: str) -> str:
        return f"https://fake.supabase.co/storage/v1/object/public/{self.name}/{path}"

    def remove(self, paths: list[str]) -> list[dict[str, Any]]:
        self.calls.append(("remove", list(paths)))
        if "remove" in self.fail_on:
            raise FakeBackendError("remove failed")
        for path in paths:
            self.objects.pop(path, None)
        return [{"name": path} for path in paths]


class FakeStorage:
    def __init__(self) -> None:
        self.buckets: dict[str, FakeBucket] = {}

    def from_(self, name: str) -> FakeBucket:
        if name not in self.buckets:
            self.buckets[name] = FakeBucket(name)
        return self.buckets[name]


@dataclass
class FakeUser:
    id: str
    email: str


@dataclass
class FakeSession:
    user: FakeUser
    access_token: str = "token"


@dataclass
class FakeAuthResponse:
    user: FakeUser | None
    session: FakeSession | None


class FakeAuth:
    def __init__(self) -> None:
        self.passwords: dict[str, str] = {}
        self.session: FakeSession | None = None
        self.callbacks: list[Any] = []
        self.fail_sign_out = False

    def add_user(self, email: str, password: str) -> None:
        self.passwords[email] = password

    def _emit(self, event: str) -> None:
        for callback in self.callbacks:
            callback(event, self.session)

    def get_session(self) -> FakeSession | None:
        return self.session

    def sign_in_with_password(self, credentials: dict[str, str]) -> FakeAuthResponse:
        email = credentials["email"]
        if self.passwords.get(email) != credentials["password"]:
            raise FakeBackendError("Invalid login credentials")
        user = FakeUser(id=f"user-{email}", email=email)
        self.session = FakeSession(user=user)
        self._emit("SIGNED_IN")
        return FakeAuthResponse(user=user, session=self.session)

    def sign_out(self) -> None:
        if self.fail_sign_out:
            raise FakeBackendError("sign out failed")
        self.session = None
        self._emit("SIGNED_OUT")

    def on_auth_state_change(self, callback: Any) -> object:
        self.callbacks.append(callback)
        return object()


class FakeSupabaseClient:
    """Duck-typed replacement for ``supabase.Client`` in tests."""

    def __init__(self) -> None:
        self.tables: dict[str, FakeTable] = {}
        self.storage = FakeStorage()
        self.auth = FakeAuth()
        self.clock: Any = None

    def table(self, name: str) -> FakeQuery:
        if name not in self.tables:
            self.tables[name] = FakeTable(name)
        table = self.tables[name]
        table.clock = self.clock
        return FakeQuery(table)

    def metadata_table(self, name: str = "image_metadata") -> FakeTable:
        self.table(name)
        return self.tables[name]

    def bucket(self, name: str = "images") -> FakeBucket:
        return self.storage.from_(name)

    def seed_image(
        self,
        storage_path: str,
        created_at: datetime,
        data: bytes = b"image-bytes",
        original_name: str | None = None,
        store_object: bool = True,
    ) -> dict[str, Any]:
        """Insert a metadata row and, unless told otherwise, its object."""
        filename = storage_path.rsplit("/", 1)[-1]
        bucket = self.bucket()
        if store_object:
            bucket.objects[storage_path] = data
        return self.metadata_table().add_row(
            {
                "filename": filename,
                "original_name": original_name or filename,
                "storage_path": storage_path,
                "public_url": bucket.get_public_url(storage_path),
                "size": len(data),
                "mime_type": "image/jpeg",
                "created_at": created_at.astimezone(UTC).isoformat(),
            }
        )


@dataclass
class FakeUploadedFile:
    """Shape of ``streamlit.runtime.uploaded_file_manager.UploadedFile`` used by the handlers."""

    name: str
    data: bytes
    type: str = "image/jpeg"

    @property
    def size(self) -> int:
        return len(self.data)

    def getvalue(self) -> bytes:
        return self.data
