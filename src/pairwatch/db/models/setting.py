from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from pairwatch.db.session import Base


class SettingRecord(Base):
    """Free-form key/value user settings."""

    __tablename__ = "Settings"

    key: Mapped[str] = mapped_column(Text, primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
