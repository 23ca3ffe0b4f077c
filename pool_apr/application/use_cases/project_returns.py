from __future__ import annotations

import math

from pool_apr.application.dto.apr_estimate import ProjectReturnsInput, ProjectReturnsOutput
from pool_apr.domain.exceptions import InvalidPositionInputError
from pool_apr.domain.services.apr_model import calculate_estimated_returns
from pool_apr.domain.services.formatters import format_apr, format_usd


class ProjectReturnsUseCase:
    def execute(self, command: ProjectReturnsInput) -> ProjectReturnsOutput:
        if not math.isfinite(command.liquidity_usd) or command.liquidity_usd <= 0:
            raise InvalidPositionInputError("liquidity_usd must be positive.")
        if not math.isfinite(command.apr) or command.apr < 0:
            raise InvalidPositionInputError("apr must be a non-negative percentage.")

        returns = calculate_estimated_returns(command.liquidity_usd, command.apr)
        return ProjectReturnsOutput(
            returns=returns,
            apr_display=format_apr(command.apr),
            daily_display=format_usd(returns.daily),
            monthly_display=format_usd(returns.monthly),
            yearly_display=format_usd(returns.yearly),
        )
