"""Services for Quality Master"""

from .form_store import FormStateStore, ScopeKey
from .form_controller import FormController
from .export_service import ExportService, generate_export_filename
from .remote_record_service import RemoteRecordService

__all__ = [
    'FormStateStore',
    'ScopeKey',
    'FormController',
    'ExportService',
    'generate_export_filename',
    'RemoteRecordService',
]
