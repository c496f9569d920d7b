import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    # Mock repositories
    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock()
    uow.users.get_by_id = AsyncMock()
    uow.users.update = AsyncMock(side_effect=lambda user: user)

    uow.products = MagicMock()
    uow.products.get_by_id = AsyncMock()

    uow.orders = MagicMock()
    uow.orders.get_latest_completed_purchase = AsyncMock()
    uow.orders.list_completed_purchases = AsyncMock(return_value=[])
    uow.orders.increment_download_count = AsyncMock(return_value=True)

    uow.download_logs = MagicMock()
    uow.download_logs.create = AsyncMock(side_effect=lambda entry: entry)
    uow.download_logs.count_for = AsyncMock(return_value=0)
    uow.download_logs.list_for_user_product = AsyncMock(return_value=[])

    uow.password_reset_tokens = MagicMock()
    uow.password_reset_tokens.create = AsyncMock(side_effect=lambda token: token)
    uow.password_reset_tokens.get_by_token = AsyncMock()
    uow.password_reset_tokens.mark_used = AsyncMock(return_value=True)
    uow.password_reset_tokens.invalidate_all_by_user_id = AsyncMock(return_value=0)
    uow.password_reset_tokens.delete_created_before = AsyncMock(return_value=0)
    uow.password_reset_tokens.count_created_since_by_email = AsyncMock(return_value=0)

    return uow
