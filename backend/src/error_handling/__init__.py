"""
Error handling and recovery engine.

Normalizes failures, classifies them, runs recovery strategies, tracks
error statistics and monitors connectivity.
"""
from .classification import ErrorClassification, ErrorClassifier
from .config import ErrorHandlerConfig
from .exceptions import (
    ErrorHandlingError,
    HealthCheckError,
    ServiceError,
    TransportError,
    TransportResponse,
)
from .fallback import ServiceRecovery, recover_from_service_error, with_fallback
from .handler import (
    ErrorHandler,
    clear_error_patterns,
    error_handler,
    get_error_statistics,
    handle_authentication_error,
    handle_error,
    handle_service_error,
    handle_validation_error,
)
from .health import SystemHealthMonitor
from .network import (
    LocalConnectivitySignal,
    NetworkMonitor,
    connectivity_signal,
    network_monitor,
)
from .normalizer import normalize
from .notifications import (
    NotificationLevel,
    Notifier,
    build_error_notification,
    get_notification_sink,
    set_notification_sink,
)
from .recovery import RecoveryEngine
from .retry import default_should_retry, execute_with_retry, get_retry_delay, with_retry
from .statistics import ErrorPatternStats, ErrorStatistics
from .strategies import get_credential_refresher, set_credential_refresher
from .types import (
    ConnectivitySignal,
    ErrorCategory,
    ErrorDescriptor,
    ErrorHandlerOptions,
    ErrorHandlingResult,
    ErrorSeverity,
    NotificationSink,
    RecoveryAction,
    RecoveryHint,
    RecoveryOutcome,
    RecoveryStrategyName,
)


__all__ = [
    # Handler
    'ErrorHandler',
    'error_handler',
    'handle_error',
    'handle_authentication_error',
    'handle_service_error',
    'handle_validation_error',
    'get_error_statistics',
    'clear_error_patterns',

    # Pipeline components
    'normalize',
    'ErrorClassifier',
    'ErrorClassification',
    'RecoveryEngine',
    'ErrorStatistics',
    'ErrorPatternStats',

    # Retry
    'execute_with_retry',
    'with_retry',
    'get_retry_delay',
    'default_should_retry',

    # Collaborators
    'Notifier',
    'NotificationLevel',
    'build_error_notification',
    'NotificationSink',
    'set_notification_sink',
    'get_notification_sink',
    'set_credential_refresher',
    'get_credential_refresher',

    # Connectivity and health
    'NetworkMonitor',
    'network_monitor',
    'connectivity_signal',
    'LocalConnectivitySignal',
    'ConnectivitySignal',
    'SystemHealthMonitor',
    'with_fallback',
    'recover_from_service_error',
    'ServiceRecovery',

    # Types
    'ErrorCategory',
    'ErrorSeverity',
    'ErrorDescriptor',
    'RecoveryHint',
    'RecoveryStrategyName',
    'RecoveryAction',
    'RecoveryOutcome',
    'ErrorHandlerOptions',
    'ErrorHandlingResult',
    'ErrorHandlerConfig',

    # Exceptions
    'ErrorHandlingError',
    'TransportError',
    'TransportResponse',
    'ServiceError',
    'HealthCheckError',
]
