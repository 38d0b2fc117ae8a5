"""
Tests for the upload and chart analytics stores
"""

from pathlib import Path

import pytest
from sqlalchemy.exc import IntegrityError

from app.core.database import SessionLocal
from app.core.table import build_chart_config
from app.models.activity import ActivityAction, UploadActivity
from app.models.chart_analytics import ChartAnalytics
from app.models.chart_config import ChartConfig
from app.services.chart_analytics_service import ChartAnalyticsService
from app.services.file_storage import FileStorage
from app.services.sheet_parser import parse_grid
from app.services.upload_service import APPEND_RETRIES, UploadService


@pytest.fixture
def storage(tmp_path):
    return FileStorage(tmp_path / "uploads")


@pytest.fixture
def upload_service(db_session, storage):
    return UploadService(db_session, storage)


def create(upload_service, storage, owner_id="user-1", name="scores.xlsx"):
    stored = storage.save(b"workbook-bytes", name)
    table = parse_grid([["Name", "Score"], ["Alice", "10"], ["Bob", 7]])
    return upload_service.create_upload(
        owner_id=owner_id,
        table=table,
        file_name=stored.file_name,
        original_name=name,
        file_path=str(stored.path),
        file_size=stored.size,
        mime_type="application/vnd.ms-excel",
    )


class TestUploadService:

    def test_create_and_get(self, upload_service, storage):
        upload = create(upload_service, storage)

        fetched = upload_service.get_upload(upload.id, "user-1")

        assert fetched is not None
        assert fetched.total_rows == 2
        assert fetched.total_columns == 2
        assert fetched.table.headers == ("Name", "Score")
        assert [c["type"] for c in fetched.column_schemas] == ["text", "number"]

    def test_get_checks_owner(self, upload_service, storage):
        upload = create(upload_service, storage)
        assert upload_service.get_upload(upload.id, "someone-else") is None

    def test_list_newest_first(self, upload_service, storage):
        first = create(upload_service, storage, name="a.xlsx")
        second = create(upload_service, storage, name="b.xlsx")
        create(upload_service, storage, owner_id="user-2")

        uploads = upload_service.list_uploads("user-1")

        assert [u.id for u in uploads] == [second.id, first.id]
        assert upload_service.count_uploads("user-1") == 2
        assert len(upload_service.list_uploads("user-1", limit=1, offset=1)) == 1

    def test_append_chart_configs_in_order(self, upload_service, storage, db_session):
        upload = create(upload_service, storage)

        upload_service.append_chart_config(upload.id, "user-1", build_chart_config("bar", "Name", "Score"))
        upload_service.append_chart_config(upload.id, "user-1", build_chart_config("line", "Name", "Score", "Trend"))

        db_session.expire_all()
        configs = upload_service.get_upload(upload.id, "user-1").chart_configs
        assert [c.position for c in configs] == [0, 1]
        assert [c.title for c in configs] == ["bar Chart", "Trend"]

    def test_append_retries_on_position_conflict(self, upload_service, storage, db_session, monkeypatch):
        upload = create(upload_service, storage)
        upload_service.append_chart_config(upload.id, "user-1", build_chart_config("bar", "Name", "Score"))
        upload_id = upload.id

        real_commit = db_session.commit
        raced = []

        def commit_after_rival_append():
            # Another writer takes the next position between our read and our commit
            if not raced:
                raced.append(True)
                with SessionLocal() as other:
                    other.add(ChartConfig(
                        upload_id=upload_id,
                        position=1,
                        chart_type="pie",
                        x_axis="Name",
                        y_axis="Score",
                        title="Rival",
                    ))
                    other.commit()
            real_commit()

        monkeypatch.setattr(db_session, "commit", commit_after_rival_append)

        stored = upload_service.append_chart_config(
            upload_id, "user-1", build_chart_config("line", "Name", "Score", "Trend")
        )

        assert stored.position == 2
        db_session.expire_all()
        configs = upload_service.get_upload(upload_id, "user-1").chart_configs
        assert [c.position for c in configs] == [0, 1, 2]
        assert [c.title for c in configs] == ["bar Chart", "Rival", "Trend"]

    def test_append_gives_up_after_retries(self, upload_service, storage, db_session, monkeypatch):
        upload = create(upload_service, storage)
        attempts = []

        def always_conflicts():
            attempts.append(True)
            raise IntegrityError("INSERT INTO chart_configs", {}, Exception("UNIQUE constraint failed"))

        monkeypatch.setattr(db_session, "commit", always_conflicts)

        with pytest.raises(RuntimeError):
            upload_service.append_chart_config(upload.id, "user-1", build_chart_config("bar", "Name", "Score"))

        assert len(attempts) == APPEND_RETRIES
        assert db_session.query(ChartConfig).count() == 0

    def test_download_actions_count_downloads(self, upload_service, storage, db_session):
        upload = create(upload_service, storage)

        for action in (
            ActivityAction.VIEW,
            ActivityAction.DOWNLOAD,
            ActivityAction.CHART_DOWNLOAD,
            ActivityAction.DOWNLOAD,
        ):
            upload_service.record_activity("user-1", upload.id, action)

        db_session.expire_all()
        assert upload_service.get_upload(upload.id, "user-1").downloads == 3
        assert db_session.query(UploadActivity).count() == 4

    def test_append_to_missing_upload(self, upload_service):
        config = build_chart_config("bar", "A", "B")
        assert upload_service.append_chart_config("missing", "user-1", config) is None

    def test_delete_cascades(self, upload_service, storage, db_session):
        upload = create(upload_service, storage)
        upload_service.append_chart_config(upload.id, "user-1", build_chart_config("bar", "Name", "Score"))
        upload_service.record_activity("user-1", upload.id, ActivityAction.UPLOAD)
        ChartAnalyticsService(db_session).save_chart_analytics(upload.id, "bar", {"labels": [], "data": []})
        file_path = upload.file_path

        assert upload_service.delete_upload(upload.id, "user-1") is True

        assert upload_service.get_upload(upload.id, "user-1") is None
        assert db_session.query(ChartConfig).count() == 0
        assert db_session.query(ChartAnalytics).count() == 0
        assert db_session.query(UploadActivity).count() == 0
        assert not Path(file_path).exists()

    def test_delete_requires_owner(self, upload_service, storage):
        upload = create(upload_service, storage)
        assert upload_service.delete_upload(upload.id, "someone-else") is False
        assert upload_service.get_upload(upload.id, "user-1") is not None


class TestChartAnalyticsService:

    def test_save_and_list(self, upload_service, storage, db_session):
        upload = create(upload_service, storage)
        service = ChartAnalyticsService(db_session)

        service.save_chart_analytics(upload.id, "bar", {"labels": ["a"], "data": [1]}, "- a is 1")
        service.save_chart_analytics(upload.id, "pie", {"labels": [], "data": []})

        records = service.list_chart_analytics(upload.id)
        assert [r.chart_type for r in records] == ["bar", "pie"]
        assert records[0].insights == "- a is 1"
        assert records[1].insights is None
        assert service.list_chart_analytics("other") == []


class TestFileStorage:

    def test_save_keeps_extension(self, storage):
        stored = storage.save(b"abc", "Report.XLSX")

        assert stored.file_name.endswith(".xlsx")
        assert stored.path.read_bytes() == b"abc"
        assert stored.size == 3

    def test_delete(self, storage):
        stored = storage.save(b"abc", "a.xls")

        assert storage.delete(str(stored.path)) is True
        assert storage.delete(str(stored.path)) is False
