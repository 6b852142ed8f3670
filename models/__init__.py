from models.user import User, UserSession
from models.resume import ResumeFile
from models.interview import Interview
from models.application import Application, PendingApplication

__all__ = ['User', 'UserSession', 'ResumeFile', 'Interview', 'Application', 'PendingApplication']
