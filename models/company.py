from extensions import db
from datetime import datetime

NOTIFICATION_PROVIDERS = ('email', 'sms', 'whatsapp', 'slack', 'webhook')


class Company(db.Model):
    __tablename__ = 'companies'
    __table_args__ = (
        db.UniqueConstraint('user_id', 'name', name='uq_companies_user_name'),
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    # list of {"provider", "value", "enabled"}, one entry per provider
    notifications = db.Column(db.JSON, nullable=False, default=list)
    brand_logo_url = db.Column(db.String(1024), nullable=False)
    brand_color = db.Column(db.String(7), nullable=False)

    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    owner = db.relationship('User', back_populates='companies')
    agents = db.relationship('Agent', back_populates='company', cascade='all, delete-orphan', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'notifications': list(self.notifications or []),
            'brandLogoUrl': self.brand_logo_url,
            'brandColor': self.brand_color,
            'userId': self.user_id,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }

    def to_summary(self):
        return {
            'id': self.id,
            'name': self.name,
            'brandColor': self.brand_color,
            'brandLogoUrl': self.brand_logo_url,
        }
