"""Model describing a stored paste."""

from datetime import datetime

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from kopy.db.session import Base
from kopy.db.time import utcnow


class Paste(Base):
    """Encrypted paste awaiting expiry.

    Rows are write-once: the server only ever inserts them and deletes them
    after ``expires_at``. The decryption key is never stored.
    """

    __tablename__ = "pastes"
    __table_args__ = (Index("ix_pastes_expires_at", "expires_at"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    # Self-contained AES-GCM blob (nonce + ciphertext + tag), base64 text.
    encrypted_content: Mapped[str] = mapped_column(Text, nullable=False)
    sender_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    password_hash: Mapped[str | None] = mapped_column(String(64), nullable=True)
    content_type: Mapped[str] = mapped_column(String(16), nullable=False, default="text")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
