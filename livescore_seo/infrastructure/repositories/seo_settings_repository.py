import logging
import json
from datetime import datetime
from typing import Any, Dict, Optional, Sequence, Type
from sqlalchemy import Column, String, JSON, DateTime, Integer
from livescore_seo.domain.repositories.repositories import SeoSettingsRecord, SeoSettingsRepository
from livescore_seo.infrastructure.database.database_service import Base, DatabaseService, get_database_service
from livescore_seo.utils.time_utils import get_current_time

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return get_current_time().replace(tzinfo=None)


class SeoGlobalModel(Base):
    """
    SQLAlchemy model for global SEO settings (brand, home, pages, labels...).
    """
    __tablename__ = "seo_global"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String, unique=True, index=True, nullable=False)  # e.g. "livesoccerr"
    data = Column(JSON, nullable=False)
    updated_at = Column(DateTime, default=_utc_now, onupdate=_utc_now)


class SeoMatchModel(Base):
    """
    SQLAlchemy model for match page templates.
    """
    __tablename__ = "seo_match"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String, unique=True, index=True, nullable=False)
    data = Column(JSON, nullable=False)
    updated_at = Column(DateTime, default=_utc_now, onupdate=_utc_now)


class SeoLeagueModel(Base):
    """
    SQLAlchemy model for league page templates.
    """
    __tablename__ = "seo_league"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String, unique=True, index=True, nullable=False)
    data = Column(JSON, nullable=False)
    updated_at = Column(DateTime, default=_utc_now, onupdate=_utc_now)


class SeoPlayerModel(Base):
    """
    SQLAlchemy model for player page templates.
    """
    __tablename__ = "seo_player"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String, unique=True, index=True, nullable=False)
    data = Column(JSON, nullable=False)
    updated_at = Column(DateTime, default=_utc_now, onupdate=_utc_now)


class SeoPageModel(Base):
    """
    SQLAlchemy model for per-page content and SEO edited in the admin.
    """
    __tablename__ = "seo_page"

    id = Column(Integer, primary_key=True, autoincrement=True)
    slug = Column(String, unique=True, index=True, nullable=False)  # e.g. "privacy-policy"
    data = Column(JSON, nullable=False)  # {"seo": {...}, "content": {...}}
    updated_at = Column(DateTime, default=_utc_now, onupdate=_utc_now)


RECORD_MODELS: Dict[str, Type[Base]] = {
    "global": SeoGlobalModel,
    "match": SeoMatchModel,
    "league": SeoLeagueModel,
    "player": SeoPlayerModel,
}


class SqlSeoSettingsRepository(SeoSettingsRepository):
    """
    SQLAlchemy-backed store of admin SEO settings.

    Read methods let database errors propagate so the caller can decide how to
    degrade; write methods log, roll back and report success as a bool.
    """

    def __init__(self, db_service: DatabaseService = None):
        self.db_service = db_service or get_database_service()

    def create_tables(self):
        """Create all tables defined in Base."""
        self.db_service.create_tables()

    def _sanitize_json_data(self, data: Any) -> Any:
        """Round-trip through JSON so only plain JSON types reach the database."""
        class DateTimeEncoder(json.JSONEncoder):
            def default(self, o):
                if isinstance(o, datetime):
                    return o.isoformat()
                return super().default(o)

        return json.loads(json.dumps(data, cls=DateTimeEncoder))

    def _model_for(self, kind: str) -> Type[Base]:
        try:
            return RECORD_MODELS[kind]
        except KeyError:
            raise ValueError(f"Unknown SEO record kind: {kind}") from None

    def find_first_by_keys(self, kind: str, keys: Sequence[str]) -> Optional[SeoSettingsRecord]:
        """
        Get the first record whose key matches, trying ``keys`` in order.

        Raises:
            SQLAlchemyError: The database could not be queried
        """
        model = self._model_for(kind)
        session = self.db_service.get_session()
        try:
            for key in keys:
                row = session.query(model).filter(model.key == key).first()
                if row:
                    return SeoSettingsRecord(key=row.key, data=row.data, updated_at=row.updated_at)
            return None
        finally:
            session.close()

    def find_page_override(self, slugs: Sequence[str]) -> Optional[SeoSettingsRecord]:
        """
        Get the newest page row among ``slugs``.

        Raises:
            SQLAlchemyError: The database could not be queried
        """
        if not slugs:
            return None
        session = self.db_service.get_session()
        try:
            row = (
                session.query(SeoPageModel)
                .filter(SeoPageModel.slug.in_(list(slugs)))
                .order_by(SeoPageModel.updated_at.desc())
                .first()
            )
            if not row:
                return None
            return SeoSettingsRecord(key=row.slug, data=row.data, updated_at=row.updated_at)
        finally:
            session.close()

    def upsert_record(self, kind: str, key: str, data: dict) -> bool:
        """
        Save or update a settings record by key.
        """
        model = self._model_for(kind)
        session = self.db_service.get_session()
        try:
            sanitized_data = self._sanitize_json_data(data)

            record = session.query(model).filter(model.key == key).first()
            if record:
                record.data = sanitized_data
                record.updated_at = _utc_now()
            else:
                record = model(key=key, data=sanitized_data)
                session.add(record)

            session.commit()
            logger.info(f"Saved SEO {kind} record '{key}'")
            return True
        except Exception as e:
            session.rollback()
            logger.error(f"Failed to save SEO {kind} record '{key}': {e}")
            return False
        finally:
            session.close()

    def upsert_page(self, slug: str, data: dict) -> bool:
        """
        Save or update a page record by slug.
        """
        session = self.db_service.get_session()
        try:
            sanitized_data = self._sanitize_json_data(data)

            record = session.query(SeoPageModel).filter(SeoPageModel.slug == slug).first()
            if record:
                record.data = sanitized_data
                record.updated_at = _utc_now()
            else:
                record = SeoPageModel(slug=slug, data=sanitized_data)
                session.add(record)

            session.commit()
            logger.info(f"Saved SEO page '{slug}'")
            return True
        except Exception as e:
            session.rollback()
            logger.error(f"Failed to save SEO page '{slug}': {e}")
            return False
        finally:
            session.close()


# Singleton instance access
_repository_instance = None

def get_seo_settings_repository() -> SqlSeoSettingsRepository:
    """Get the singleton SEO settings repository."""
    global _repository_instance
    if _repository_instance is None:
        _repository_instance = SqlSeoSettingsRepository()
    return _repository_instance
