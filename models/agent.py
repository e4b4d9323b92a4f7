from extensions import db
from datetime import datetime


class Agent(db.Model):
    __tablename__ = 'agents'
    __table_args__ = (
        db.UniqueConstraint('company_id', 'name', name='uq_agents_company_name'),
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(500), nullable=False)

    company_id = db.Column(db.Integer, db.ForeignKey('companies.id'), nullable=False, index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    company = db.relationship('Company', back_populates='agents')
    threads = db.relationship('Thread', back_populates='agent', cascade='all, delete-orphan', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'companyId': self.company_id,
            'company': self.company.to_summary() if self.company else None,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
