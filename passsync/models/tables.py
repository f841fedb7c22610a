from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Index, Integer, Text, func

from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata


class Candidates(Base):
    __tablename__ = 'candidates'

    code = Column(Text, nullable=False, unique=True)
    name = Column(Text, nullable=False)
    title = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    id = Column(Integer, primary_key=True)
    phone = Column(Text)
    department = Column(Text)
    location = Column(Text)
    status = Column(Text, nullable=False, server_default='Active')
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())

    timeline = relationship(
        'TimelineEntries',
        back_populates='candidate',
        order_by='TimelineEntries.order',
        cascade='all, delete-orphan',
    )


class TimelineEntries(Base):
    __tablename__ = 'timeline_entries'

    candidate_id = Column(ForeignKey('candidates.id', ondelete='CASCADE'), nullable=False)
    title = Column(Text, nullable=False)
    date = Column(Text, nullable=False)
    status = Column(Text, nullable=False)
    order = Column(Integer, nullable=False)
    id = Column(Integer, primary_key=True)
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())

    candidate = relationship('Candidates', back_populates='timeline')


class InterviewSlots(Base):
    __tablename__ = 'interview_slots'
    __table_args__ = (
        Index('ix_interview_slots_link_id', 'link_id'),
        Index('ix_interview_slots_manager_code', 'manager_code'),
        Index('ix_interview_slots_candidate_code', 'candidate_code'),
    )

    link_id = Column(Text, nullable=False)
    label = Column(Text, nullable=False)
    date = Column(Text, nullable=False)
    time = Column(Text, nullable=False)
    status = Column(Text, nullable=False, server_default='open')
    manager_code = Column(Text, nullable=False)
    id = Column(Integer, primary_key=True)
    candidate_code = Column(Text)
    notes = Column(Text)
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())
    updated_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())


class Notifications(Base):
    __tablename__ = 'notifications'
    __table_args__ = (
        Index('ix_notifications_pass_code', 'pass_code'),
        Index('ix_notifications_pending', 'delivered', 'scheduled_for'),
    )

    pass_code = Column(Text, nullable=False)
    type = Column(Text, nullable=False)
    title = Column(Text, nullable=False)
    message = Column(Text, nullable=False)
    priority = Column(Text, nullable=False, server_default='normal')
    read = Column(Boolean, nullable=False, default=False)
    delivered = Column(Boolean, nullable=False, default=False)
    id = Column(Integer, primary_key=True)
    scheduled_for = Column(DateTime)
    delivered_at = Column(DateTime)
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())


class PassSettings(Base):
    __tablename__ = 'pass_settings'

    pass_code = Column(Text, nullable=False, unique=True)
    theme = Column(Text, nullable=False, server_default='light')
    module_timeline = Column(Boolean, nullable=False, default=True)
    module_documents = Column(Boolean, nullable=False, default=True)
    module_availability = Column(Boolean, nullable=False, default=True)
    module_interactions = Column(Boolean, nullable=False, default=True)
    automation_reminders = Column(Boolean, nullable=False, default=True)
    automation_docs = Column(Boolean, nullable=False, default=True)
    automation_digest = Column(Boolean, nullable=False, default=False)
    id = Column(Integer, primary_key=True)
    updated_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())


class AdminActions(Base):
    __tablename__ = 'admin_actions'

    action_type = Column(Text, nullable=False)
    target_codes = Column(JSON, nullable=False)
    performed_by = Column(Text, nullable=False)
    status = Column(Text, nullable=False, server_default='completed')
    id = Column(Integer, primary_key=True)
    payload = Column(JSON)
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())
