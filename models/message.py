from extensions import db
from datetime import datetime

MESSAGE_ROLES = ('user', 'assistant')


class Message(db.Model):
    __tablename__ = "messages"
    __table_args__ = (
        db.Index('ix_messages_thread_created', 'thread_id', 'created_at'),
    )

    id = db.Column(db.Integer, primary_key=True)

    thread_id = db.Column(
        db.Integer,
        db.ForeignKey("threads.id"),
        nullable=False,
        index=True
    )

    role = db.Column(db.String(20), nullable=False)
    # user / assistant

    content = db.Column(db.Text, nullable=False)

    created_at = db.Column(
        db.DateTime,
        default=datetime.utcnow
    )
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    thread = db.relationship('Thread', back_populates='messages')

    def to_dict(self):
        return {
            'id': self.id,
            'threadId': self.thread_id,
            'role': self.role,
            'content': self.content,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
