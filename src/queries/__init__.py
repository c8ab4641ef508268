"""Query catalogue for the books collection.

Filters, projection, sorting, pagination, aggregation pipelines, index
creation and query explain, each as a plain function over a pymongo
collection handle.
"""

from .catalogue import (
    average_by_pipeline,
    average_key,
    average_price_by_genre,
    count_by_decade,
    count_by_decade_pipeline,
    count_by_genre,
    count_by_pipeline,
    create_author_year_index,
    create_title_index,
    decade_label,
    delete_by_title,
    explain_title_lookup,
    find_by_author,
    find_by_field,
    find_by_genre,
    find_by_title,
    find_in_stock_published_after,
    find_projected,
    find_published_after,
    paginate,
    sorted_by,
    top_author,
    top_group_by_count_pipeline,
    update_price_by_title,
)

__all__ = [
    "average_by_pipeline",
    "average_key",
    "average_price_by_genre",
    "count_by_decade",
    "count_by_decade_pipeline",
    "count_by_genre",
    "count_by_pipeline",
    "create_author_year_index",
    "create_title_index",
    "decade_label",
    "delete_by_title",
    "explain_title_lookup",
    "find_by_author",
    "find_by_field",
    "find_by_genre",
    "find_by_title",
    "find_in_stock_published_after",
    "find_projected",
    "find_published_after",
    "paginate",
    "sorted_by",
    "top_author",
    "top_group_by_count_pipeline",
    "update_price_by_title",
]
