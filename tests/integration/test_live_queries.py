"""
Integration tests for live query streams.

Tests cover:
- Initial emission and re-emission after committed writes
- Table filtering (unrelated writes don't re-run a query)
- Cascaded deletes reaching dependent queries
- Coalescing of bursts and subscription cleanup
"""

import asyncio

import pytest

from gamehaven.models import Game, Transaction, TransactionDetail
from gamehaven.services.live_query import next_result


def make_game(title: str, stock: int = 10, category: str = "Action") -> Game:
    return Game(
        title=title, description="", developer="Test Studio",
        category=category, price=1000.0, stock=stock
    )


class TestLiveQueries:

    @pytest.mark.anyio
    async def test_stream_emits_current_then_updates(self, app):
        """
        Arrange: Empty catalog, stream of all games
        Act: Insert a game, then update it
        Assert: Empty list first, then one full result per committed write
        """
        # Arrange
        stream = app.games.all_games().stream()
        try:
            assert await next_result(stream) == []

            # Act
            game = await app.games.insert(make_game("Cyber Jump"))
            after_insert = await next_result(stream)

            game.stock = 0
            await app.games.update(game)
            after_update = await next_result(stream)

            # Assert
            assert [g.title for g in after_insert] == ["Cyber Jump"]
            assert after_update[0].stock == 0
        finally:
            await stream.aclose()

    @pytest.mark.anyio
    async def test_unrelated_table_does_not_rerun(self, seeded_app):
        stream = seeded_app.transactions.all_transactions().stream()
        try:
            assert await next_result(stream) == []

            await seeded_app.games.insert(make_game("Unrelated"))

            with pytest.raises(asyncio.TimeoutError):
                await next_result(stream, timeout=0.2)
        finally:
            await stream.aclose()

    @pytest.mark.anyio
    async def test_burst_of_writes_coalesced(self, app):
        # Arrange
        stream = app.games.all_games().stream()
        try:
            await next_result(stream)

            # Act
            await app.games.insert(make_game("One"))
            await app.games.insert(make_game("Two"))
            await app.games.insert(make_game("Three"))
            result = await next_result(stream)

            # Assert
            assert [g.title for g in result] == ["Three", "Two", "One"]
            with pytest.raises(asyncio.TimeoutError):
                await next_result(stream, timeout=0.2)
        finally:
            await stream.aclose()

    @pytest.mark.anyio
    async def test_cascade_reaches_library_stream(self, seeded_app):
        """
        Arrange: User 2 owns game 1; stream of user 2's library
        Act: Delete game 1 from the catalog
        Assert: The library stream re-emits without the game
        """
        # Arrange
        await seeded_app.transactions.insert_transaction(
            Transaction(user_id=2, total_price=25000.0),
            [TransactionDetail(game_id=1, price=25000.0, qty=1)],
        )
        stream = seeded_app.purchased_games.purchased_games_by_user(2).stream()
        try:
            assert len(await next_result(stream)) == 1

            # Act
            await seeded_app.games.delete(await seeded_app.games.get_by_id(1))

            # Assert
            assert await next_result(stream) == []
        finally:
            await stream.aclose()

    @pytest.mark.anyio
    async def test_sales_summary_stream(self, seeded_app):
        stream = seeded_app.transactions.sales_summary().stream()
        try:
            assert (await next_result(stream)).total_transactions == 0

            await seeded_app.transactions.insert_transaction(
                Transaction(user_id=1, total_price=40000.0),
                [TransactionDetail(game_id=2, price=40000.0, qty=1)],
            )

            summary = await next_result(stream)
            assert summary.total_transactions == 1
            assert summary.total_revenue == pytest.approx(40000.0)
        finally:
            await stream.aclose()

    @pytest.mark.anyio
    async def test_closing_stream_unsubscribes(self, app):
        # Arrange
        publisher = app.database.publisher
        stream = app.games.all_games().stream()
        await next_result(stream)
        assert publisher.get_subscriber_count("games") == 1

        # Act
        await stream.aclose()

        # Assert
        assert publisher.get_subscriber_count("games") == 0

    @pytest.mark.anyio
    async def test_async_iteration(self, app):
        await app.games.insert(make_game("Cyber Jump"))

        async for games in app.games.all_games():
            assert [g.title for g in games] == ["Cyber Jump"]
            break

    @pytest.mark.anyio
    async def test_filtered_queries(self, seeded_app):
        # Arrange
        await seeded_app.games.insert(make_game("Low Stock Shooter", stock=2, category="Shooter"))

        # Act
        shooters = await seeded_app.games.games_by_category("Shooter").get()
        categories = await seeded_app.games.categories().get()
        low_stock = await seeded_app.games.low_stock_games().get()
        searched = await seeded_app.games.search_games("PUZZLE").get()

        # Assert
        assert {g.title for g in shooters} == {"Zombie Arena", "Low Stock Shooter"}
        assert categories == ["Action", "Puzzle", "Shooter"]
        assert [g.title for g in low_stock] == ["Low Stock Shooter"]
        assert [g.title for g in searched] == ["Puzzle Quest"]
