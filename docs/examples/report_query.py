"""
Example: building a grouped report query.

Shows SELECT modifiers, unescaped aggregate expressions, HAVING with
connectors and collated values.
"""

from ff_querybuilder import MySQLEscaper, configure_logging, load_settings


def build_report_query(country: str, min_orders: int) -> str:
    settings = load_settings(log_level="DEBUG")
    configure_logging(settings)

    qb = MySQLEscaper(settings=settings).get_query_builder(settings=settings)

    return (
        qb.select_mode("SQL_CALC_FOUND_ROWS")
        .select("c.id, c.name")
        .select("COUNT(o.id) AS orders", escape=False)
        .from_("customers c JOIN orders o ON o.customer_id = c.id")
        .where("c.country", qb.value(country, collation="utf8mb4_general_ci"))
        .where_like("c.email", qb.likevalue("@example.com", "backward"), negate=True)
        .having("orders", min_orders, ">=")
        .sql_or()
        .having("c.vip", True)
        .order_by("orders", asc=False)
        .build()
    )


if __name__ == "__main__":
    print(build_report_query("NL", 5))
