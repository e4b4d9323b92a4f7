from extensions import db
from datetime import datetime

THREAD_ORIGINS = ('whatsapp', 'instagram', 'website', 'tiktok', 'messenger')


class Thread(db.Model):
    __tablename__ = 'threads'
    __table_args__ = (
        db.Index('ix_threads_lookup', 'contact_id', 'agent_id', 'origin', 'created_at'),
    )

    id = db.Column(db.Integer, primary_key=True)
    contact_id = db.Column(db.Integer, db.ForeignKey('contacts.id'), nullable=False, index=True)
    agent_id = db.Column(db.Integer, db.ForeignKey('agents.id'), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    origin = db.Column(db.String(20), nullable=False, index=True)
    # whatsapp / instagram / website / tiktok / messenger

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    contact = db.relationship('Contact', back_populates='threads')
    agent = db.relationship('Agent', back_populates='threads')
    messages = db.relationship(
        'Message',
        back_populates='thread',
        cascade='all, delete-orphan',
        order_by='Message.created_at',
        lazy=True,
    )

    def to_dict(self):
        return {
            'id': self.id,
            'contactId': self.contact_id,
            'agentId': self.agent_id,
            'name': self.name,
            'origin': self.origin,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
