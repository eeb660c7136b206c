r"""
Shape of the store as seen by the benchmark.

Every client path selects the same columns and relations in the same order,
so payload sizes stay comparable. The schema itself is owned elsewhere and
is never created or migrated here.
"""

from access_bench.types import TableScan

__all__ = [
    "BOOKS",
    "FEATURED_COLUMNS",
    "INSTRUCTORS",
    "INSTRUCTOR_BOOKS",
    "INSTRUCTOR_COLUMNS",
    "INSTRUCTOR_KEYWORDS",
    "KEYWORDS",
    "POSTS_SCAN",
    "POST_COMMENTS_SCAN",
    "SOCIAL_LINK_COLUMNS",
    "instructor_tree_select",
    "instructor_tree_sql",
    "scan_sql",
]

INSTRUCTORS = "instructors"
KEYWORDS = "keywords"
BOOKS = "books"
INSTRUCTOR_BOOKS = "instructor_books"
INSTRUCTOR_KEYWORDS = "instructor_keywords"
SOCIAL_LINKS = "instructor_social_links"
FEATURED = "featured_instructors"

POSTS_SCAN = TableScan(
    table="posts",
    columns=("id", "user_id", "created_at", "is_deleted"),
)

POST_COMMENTS_SCAN = TableScan(
    table="post_comments",
    columns=("id", "post_id", "user_id", "created_at"),
)

INSTRUCTOR_COLUMNS: tuple[str, ...] = (
    "id",
    "first_name",
    "last_name",
    "honorific",
    "slug",
    "title",
    "bio",
    "short_bio",
    "trailer_url",
    "is_published",
    "user_id",
)

SOCIAL_LINK_COLUMNS: tuple[str, ...] = ("facebook", "twitter", "instagram", "youtube", "tiktok", "website")
BOOK_COLUMNS: tuple[str, ...] = ("id", "title", "url")
KEYWORD_COLUMNS: tuple[str, ...] = ("id", "name")
FEATURED_COLUMNS: tuple[str, ...] = ("order",)


def instructor_tree_select() -> str:
    """PostgREST ``select`` parameter for the nested instructor fetch."""
    return ",".join([
        ",".join(INSTRUCTOR_COLUMNS),
        f"{SOCIAL_LINKS}({','.join(SOCIAL_LINK_COLUMNS)})",
        f"{INSTRUCTOR_BOOKS}({BOOKS}({','.join(BOOK_COLUMNS)}))",
        f"{INSTRUCTOR_KEYWORDS}(order,{KEYWORDS}({','.join(KEYWORD_COLUMNS)}))",
        f"{FEATURED}({','.join(FEATURED_COLUMNS)})",
    ])


def _json_object(alias: str, columns: tuple[str, ...]) -> str:
    pairs = ", ".join(f"'{c}', {alias}.\"{c}\"" for c in columns)
    return f"json_build_object({pairs})"


def instructor_tree_sql(limit_param: str) -> str:
    """Single Postgres statement for the nested instructor fetch.

    Relations are folded into JSON columns with correlated subqueries,
    mirroring the PostgREST embedding.

    Args:
        limit_param: Placeholder for the row limit (``$1`` or ``:limit``).
    """
    columns = ", ".join(f"i.{c}" for c in INSTRUCTOR_COLUMNS)
    return f"""
        select {columns},
            (select {_json_object("s", SOCIAL_LINK_COLUMNS)}
                from {SOCIAL_LINKS} s where s.instructor_id = i.id limit 1) as {SOCIAL_LINKS},
            (select coalesce(json_agg(json_build_object('books', {_json_object("b", BOOK_COLUMNS)})), '[]'::json)
                from {INSTRUCTOR_BOOKS} ib join {BOOKS} b on b.id = ib.book_id
                where ib.instructor_id = i.id) as {INSTRUCTOR_BOOKS},
            (select coalesce(json_agg(json_build_object(
                    'order', ik."order", 'keywords', {_json_object("k", KEYWORD_COLUMNS)})), '[]'::json)
                from {INSTRUCTOR_KEYWORDS} ik join {KEYWORDS} k on k.id = ik.keyword_id
                where ik.instructor_id = i.id) as {INSTRUCTOR_KEYWORDS},
            (select coalesce(json_agg({_json_object("f", FEATURED_COLUMNS)}), '[]'::json)
                from {FEATURED} f where f.instructor_id = i.id) as {FEATURED}
        from {INSTRUCTORS} i
        order by i.created_at desc
        limit {limit_param}
    """


def scan_sql(scan: TableScan, limit_param: str) -> str:
    """Flat scan statement for raw-SQL paths."""
    columns = ", ".join(f'"{c}"' for c in scan.columns)
    return f'select {columns} from "{scan.table}" order by "{scan.order_by}" desc limit {limit_param}'
