"""Application layer DI providers."""

from dishka import Scope, provide

from devtyper.application.usecase.attempt import (
    GetDailyAttemptsUseCase,
    GetStatsUseCase,
    SubmitAttemptUseCase,
)
from devtyper.application.usecase.github import (
    CheckGitHubIdentityUseCase,
    GitHubLinkFlowUseCase,
)
from devtyper.config import AttemptSettings, Settings
from devtyper.domain.service import (
    AuthService,
    IdentityLinkService,
    StateTokenService,
    StatsService,
)
from devtyper.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # GitHub use cases
    @provide(scope=Scope.REQUEST)
    def get_github_link_flow_use_case(
        self,
        auth_service: AuthService,
        state_token_service: StateTokenService,
        identity_link_service: IdentityLinkService,
        settings: Settings,
    ) -> GitHubLinkFlowUseCase:
        """Provide GitHub link flow use case."""
        return GitHubLinkFlowUseCase(
            auth_service=auth_service,
            state_token_service=state_token_service,
            identity_link_service=identity_link_service,
            settings=settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_check_github_identity_use_case(
        self, identity_link_service: IdentityLinkService
    ) -> CheckGitHubIdentityUseCase:
        """Provide GitHub identity check use case."""
        return CheckGitHubIdentityUseCase(identity_link_service=identity_link_service)

    # Attempt use cases
    @provide(scope=Scope.REQUEST)
    def get_submit_attempt_use_case(
        self, stats_service: StatsService
    ) -> SubmitAttemptUseCase:
        """Provide submit attempt use case."""
        return SubmitAttemptUseCase(stats_service=stats_service)

    @provide(scope=Scope.REQUEST)
    def get_stats_use_case(self, stats_service: StatsService) -> GetStatsUseCase:
        """Provide get stats use case."""
        return GetStatsUseCase(stats_service=stats_service)

    @provide(scope=Scope.REQUEST)
    def get_daily_attempts_use_case(
        self, stats_service: StatsService, attempt_settings: AttemptSettings
    ) -> GetDailyAttemptsUseCase:
        """Provide daily attempts use case."""
        return GetDailyAttemptsUseCase(
            stats_service=stats_service, attempt_settings=attempt_settings
        )
