from .consumer import (
    Outcome,
    StudentRegisteredEvent,
    StudentRegistrationConsumer,
    handle_student_registered,
)

__all__ = ["Outcome", "StudentRegisteredEvent", "StudentRegistrationConsumer", "handle_student_registered"]
