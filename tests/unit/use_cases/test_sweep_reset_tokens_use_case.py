import pytest

from src.app.use_cases.maintenance import SweepResetTokensUseCase


@pytest.mark.asyncio
async def test_sweep_commits_and_reports_count(mock_uow):
    mock_uow.password_reset_tokens.delete_created_before.return_value = 7

    result = await SweepResetTokensUseCase(mock_uow).execute()

    assert result.is_ok()
    assert result.value.deleted_count == 7
    mock_uow.commit.assert_awaited_once()
