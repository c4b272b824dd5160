"""
Integration tests for the purchase and download flow.

Exercises the facades end-to-end on a seeded in-memory store:
login, checkout, library, download status and the download log.
"""

from datetime import timedelta

import pytest

from gamehaven.core.exceptions import StorageError
from gamehaven.models import DownloadStatus, Transaction, TransactionDetail, utc_now
from gamehaven.services.purchase import PurchaseLine, total_of


async def buy(app, user_id: int, *game_ids: int) -> int:
    lines = [PurchaseLine.from_game(await app.games.get_by_id(gid)) for gid in game_ids]
    details = [line.to_detail() for line in lines]
    return await app.transactions.insert_transaction(
        Transaction(user_id=user_id, total_price=total_of(details)),
        details,
    )


class TestCheckout:

    @pytest.mark.anyio
    async def test_admin_login_after_seeding(self, seeded_app):
        """
        Arrange: Freshly seeded store
        Act: Log in as farr@gmail.com / 123
        Assert: The admin account comes back
        """
        # Act
        user = await seeded_app.users.login("farr@gmail.com", "123")

        # Assert
        assert user is not None
        assert user.username == "Farr"
        assert user.is_admin

    @pytest.mark.anyio
    async def test_purchase_creates_one_owned_game(self, seeded_app):
        """
        Arrange: Seeded store (user 1, game 2 priced 40000)
        Act: Record a transaction with one line item for game 2
        Assert: Transaction, line item and one NOT_DOWNLOADED ownership record
        """
        # Act
        tx_id = await seeded_app.transactions.insert_transaction(
            Transaction(user_id=1, total_price=40000.0),
            [TransactionDetail(game_id=2, price=40000.0, qty=1)],
        )

        # Assert
        assert tx_id > 0
        tx = await seeded_app.transactions.get_transaction_by_id(tx_id)
        assert tx.user_id == 1
        assert tx.total_price == 40000.0

        details = await seeded_app.transactions.details(tx_id).get()
        assert [(d.game_id, d.price, d.qty) for d in details] == [(2, 40000.0, 1)]

        owned = await seeded_app.purchased_games.purchased_games_by_user(1).get()
        assert len(owned) == 1
        assert owned[0].game_id == 2
        assert owned[0].transaction_id == tx_id
        assert owned[0].download_status == DownloadStatus.NOT_DOWNLOADED
        assert owned[0].purchase_date == tx.date
        assert await seeded_app.purchased_games.is_game_purchased(1, 2) is True
        assert await seeded_app.purchased_games.is_game_purchased(1, 3) is False

    @pytest.mark.anyio
    async def test_multi_item_purchase(self, seeded_app):
        # Act
        tx_id = await buy(seeded_app, 2, 1, 3)

        # Assert
        tx = await seeded_app.transactions.get_transaction_by_id(tx_id)
        assert tx.total_price == pytest.approx(40000.0)
        assert await seeded_app.purchased_games.get_purchased_games_count(2) == 2
        assert len(await seeded_app.transactions.details(tx_id).get()) == 2

    @pytest.mark.anyio
    async def test_failed_purchase_leaves_nothing_behind(self, seeded_app):
        """
        Arrange: Seeded store
        Act: Record a purchase whose line item points at a missing game
        Assert: StorageError and no transaction or ownership rows
        """
        # Act & Assert
        with pytest.raises(StorageError):
            await seeded_app.transactions.insert_transaction(
                Transaction(user_id=1, total_price=1.0),
                [TransactionDetail(game_id=999, price=1.0, qty=1)],
            )

        assert await seeded_app.transactions.all_transactions().get() == []
        assert await seeded_app.purchased_games.get_purchased_games_count(1) == 0

    @pytest.mark.anyio
    async def test_transactions_by_user(self, seeded_app):
        # Arrange
        first = await buy(seeded_app, 1, 1)
        await buy(seeded_app, 2, 2)
        second = await buy(seeded_app, 1, 3)

        # Act
        farr_txs = await seeded_app.transactions.transactions_by_user(1).get()

        # Assert
        assert [t.id for t in farr_txs] == [second, first]

    @pytest.mark.anyio
    async def test_sales_summary(self, seeded_app):
        # Arrange
        await buy(seeded_app, 1, 2)
        await buy(seeded_app, 2, 3)

        # Act
        summary = await seeded_app.transactions.sales_summary().get()

        # Assert
        assert summary.total_transactions == 2
        assert summary.total_revenue == pytest.approx(55000.0)
        assert summary.average_transaction == pytest.approx(27500.0)


class TestDownloads:

    @pytest.mark.anyio
    async def test_downloaded_appends_history(self, seeded_app):
        """
        Arrange: User 1 owns game 2
        Act: Set the download status to DOWNLOADED
        Assert: Status stored and exactly one history row dated at or after the call
        """
        # Arrange
        await buy(seeded_app, 1, 2)
        owned = (await seeded_app.purchased_games.purchased_games_by_user(1).get())[0]
        before = utc_now()

        # Act
        updated = await seeded_app.purchased_games.update_download_status(
            owned.id, DownloadStatus.DOWNLOADED
        )

        # Assert
        assert updated.download_status == DownloadStatus.DOWNLOADED
        history = await seeded_app.downloads.history_by_user(1).get()
        assert len(history) == 1
        assert history[0].game_id == 2
        assert history[0].download_date >= before
        assert await seeded_app.downloads.get_download_count(1) == 1

    @pytest.mark.anyio
    async def test_intermediate_status_has_no_history(self, seeded_app):
        # Arrange
        await buy(seeded_app, 1, 2)
        owned = (await seeded_app.purchased_games.purchased_games_by_user(1).get())[0]

        # Act
        updated = await seeded_app.purchased_games.update_download_status(
            owned.id, DownloadStatus.DOWNLOADING
        )

        # Assert
        assert updated.download_status == DownloadStatus.DOWNLOADING
        assert await seeded_app.downloads.get_download_count(1) == 0

    @pytest.mark.anyio
    async def test_each_completion_is_logged(self, seeded_app):
        # Arrange
        await buy(seeded_app, 1, 2)
        owned = (await seeded_app.purchased_games.purchased_games_by_user(1).get())[0]

        # Act
        await seeded_app.purchased_games.update_download_status(owned.id, DownloadStatus.DOWNLOADED)
        await seeded_app.purchased_games.update_download_status(owned.id, DownloadStatus.INSTALLED)

        # Assert
        assert len(await seeded_app.downloads.history_by_game(2).get()) == 2
        latest = await seeded_app.downloads.get_history_by_user_and_game(1, 2)
        assert latest is not None

    @pytest.mark.anyio
    async def test_unknown_purchase_id(self, seeded_app):
        result = await seeded_app.purchased_games.update_download_status(
            999, DownloadStatus.DOWNLOADED
        )

        assert result is None
        assert await seeded_app.downloads.get_download_count(1) == 0


class TestDeletes:

    @pytest.mark.anyio
    async def test_deleting_user_cascades_but_keeps_history(self, seeded_app):
        """
        Arrange: User 2 bought and downloaded game 1
        Act: Delete user 2
        Assert: Transactions, line items and ownership gone; history kept
        """
        # Arrange
        tx_id = await buy(seeded_app, 2, 1)
        owned = (await seeded_app.purchased_games.purchased_games_by_user(2).get())[0]
        await seeded_app.purchased_games.update_download_status(owned.id, DownloadStatus.DOWNLOADED)
        shir = await seeded_app.users.get_user_by_id(2)

        # Act
        deleted = await seeded_app.users.delete(shir)

        # Assert
        assert deleted is True
        assert await seeded_app.transactions.get_transaction_by_id(tx_id) is None
        assert await seeded_app.transactions.details(tx_id).get() == []
        assert await seeded_app.purchased_games.get_purchased_games_count(2) == 0
        assert await seeded_app.downloads.get_download_count(2) == 1

    @pytest.mark.anyio
    async def test_deleting_game_removes_ownership_and_line_items(self, seeded_app):
        # Arrange
        tx_id = await buy(seeded_app, 1, 2, 3)
        zombie_arena = await seeded_app.games.get_by_id(2)

        # Act
        await seeded_app.games.delete(zombie_arena)

        # Assert
        assert await seeded_app.transactions.get_transaction_by_id(tx_id) is not None
        details = await seeded_app.transactions.details(tx_id).get()
        assert [d.game_id for d in details] == [3]
        assert await seeded_app.purchased_games.is_game_purchased(1, 2) is False
        assert await seeded_app.purchased_games.is_game_purchased(1, 3) is True

    @pytest.mark.anyio
    async def test_purchase_date_close_to_now(self, seeded_app):
        tx_id = await buy(seeded_app, 1, 1)

        tx = await seeded_app.transactions.get_transaction_by_id(tx_id)

        assert abs(utc_now() - tx.date) < timedelta(minutes=1)
