"""Order book aggregation and bet economics."""

from predictx.orderbook.book import build_order_book, order_book_from_orders, sort_back, sort_lay

__all__ = ["build_order_book", "order_book_from_orders", "sort_back", "sort_lay"]
