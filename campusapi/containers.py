from dependency_injector import containers, providers

from campusapi.config import settings
from campusapi.services.aws_service import AwsService
from campusapi.services.email_service import EmailService
from campusapi.services.balance_release_service import BalanceReleaseService
from campusapi.services.balance_service import BalanceService
from campusapi.services.unread_message_service import UnreadMessageService
from campusapi.services.notification_service import NotificationService


class ConfigModule(containers.DeclarativeContainer):
    """Application configuration."""

    config = providers.Object(settings)


class ServiceModule(containers.DeclarativeContainer):
    """Service layer dependencies.

    DB 세션은 요청마다 FastAPI get_db 의존성으로 열고 닫으므로,
    세션이 필요한 서비스는 라우터에서 provider(db=...) 형태로 생성합니다.
    """

    config = providers.DependenciesContainer()

    aws_service = providers.Singleton(AwsService, settings=config.config)
    email_service = providers.Singleton(
        EmailService, settings=config.config, aws_service=aws_service
    )

    balance_release_service = providers.Factory(
        BalanceReleaseService, settings=config.config
    )
    balance_service = providers.Factory(BalanceService, settings=config.config)
    unread_message_service = providers.Factory(
        UnreadMessageService, settings=config.config, email_service=email_service
    )
    notification_service = providers.Factory(NotificationService)


class Container(containers.DeclarativeContainer):
    """Application container."""

    wiring_config = containers.WiringConfiguration(
        modules=[
            "campusapi.routers.balance_router",
            "campusapi.routers.cron_router",
            "campusapi.routers.notification_router",
        ],
    )

    config = providers.Container(ConfigModule)
    services = providers.Container(ServiceModule, config=config)
