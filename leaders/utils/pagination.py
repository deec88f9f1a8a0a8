from typing import Any, Dict, List


def page_count(total: int, per_page: int) -> int:
    return (total + per_page - 1) // per_page


def page_envelope(key: str, items: List[Any], total: int, page: int, per_page: int) -> Dict[str, Any]:
    """Réponse paginée commune : {<key>, total, page, per_page, pages}"""
    return {
        key: items,
        "total": total,
        "page": page,
        "per_page": per_page,
        "pages": page_count(total, per_page),
    }
