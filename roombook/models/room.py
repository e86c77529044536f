from roombook.extensions import db

class Room(db.Model):
    __tablename__ = 'rooms'

    id = db.Column(db.Integer, primary_key=True)
    branch_id = db.Column(db.Integer, db.ForeignKey('branches.id'), nullable=False)
    name = db.Column(db.String(64), nullable=False)
    capacity = db.Column(db.Integer, nullable=False)
    is_active = db.Column(db.Boolean, default=True)

    __table_args__ = (
        db.UniqueConstraint('branch_id', 'name', name='uq_rooms_branch_name'),
        db.CheckConstraint('capacity > 0', name='check_capacity_positive'),
    )

    @property
    def timezone(self):
        """IANA zone of the branch the room belongs to."""
        return self.branch.timezone if self.branch else 'UTC'

    def to_dict(self):
        return {
            'id': self.id,
            'branch_id': self.branch_id,
            'name': self.name,
            'capacity': self.capacity,
            'is_active': self.is_active
        }
