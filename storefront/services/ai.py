# storefront/services/ai.py
"""
Product search and ranking through a chat-completion gateway.

The model is asked for a JSON array of product ids; whatever array it
returns is mapped back onto the products we sent, in the model's order.
"""
import json
import logging
import re

import requests
from flask import current_app

from ..errors import ConfigurationError, GatewayError, PaymentRequired, RateLimited

logger = logging.getLogger(__name__)

SEARCH_SYSTEM_PROMPT = (
    "You are a product search expert. Analyze the user's search query and rank products by "
    "relevance. Return ONLY a JSON array of product IDs in order of relevance (most relevant "
    "first). Format: [\"id1\", \"id2\", \"id3\"]"
)

RANK_SYSTEM_PROMPT = (
    "You are a product recommendation expert. Rank products intelligently based on popularity, "
    "recency, pricing, and user context. Return ONLY a JSON array of product IDs in recommended "
    "order. Format: [\"id1\", \"id2\", \"id3\"]"
)

DEFAULT_RANK_CONTEXT = (
    'product listing page - intelligently rank by popularity, recency, pricing, and relevance'
)

ID_ARRAY = re.compile(r'\[.*\]', re.DOTALL)


def chat_completion(messages):
    """Send ``messages`` to the gateway and return the first choice's text."""
    config = current_app.config
    api_key = config.get('AI_GATEWAY_API_KEY')
    if not api_key:
        raise ConfigurationError('AI gateway API key is not configured.')

    try:
        response = requests.post(
            config['AI_GATEWAY_URL'],
            headers={'Authorization': f'Bearer {api_key}', 'Content-Type': 'application/json'},
            json={'model': config['AI_MODEL'], 'messages': messages},
            timeout=config['AI_TIMEOUT'],
        )
    except requests.exceptions.RequestException as e:
        logger.error("AI gateway unreachable: %s", e)
        raise GatewayError('AI gateway error')

    if response.status_code == 429:
        raise RateLimited('Rate limit exceeded. Please try again later.')
    if response.status_code == 402:
        raise PaymentRequired('Payment required. Please add credits to your workspace.')
    if not response.ok:
        logger.error("AI gateway error: %s %s", response.status_code, response.text)
        raise GatewayError('AI gateway error')

    try:
        return response.json()['choices'][0]['message']['content'] or ''
    except (ValueError, KeyError, IndexError, TypeError):
        logger.error("Unexpected AI gateway payload: %s", response.text)
        raise GatewayError('AI gateway error')


def parse_ranked_ids(text):
    match = ID_ARRAY.search(text or '')
    if not match:
        return []
    try:
        ids = json.loads(match.group(0))
    except ValueError:
        logger.warning("AI response held no parseable id array")
        return []
    if not isinstance(ids, list):
        return []
    return [str(i) for i in ids if isinstance(i, (str, int))]


def order_by_ids(products, ids):
    by_id = {p.id: p for p in products}
    ranked, seen = [], set()
    for product_id in ids:
        if product_id in by_id and product_id not in seen:
            ranked.append(by_id[product_id])
            seen.add(product_id)
    return ranked


def search_products(query, products):
    catalog = [{'id': p.id, 'name': p.name, 'description': p.description} for p in products]
    content = chat_completion([
        {'role': 'system', 'content': SEARCH_SYSTEM_PROMPT},
        {'role': 'user', 'content': (
            f'Search query: "{query}"\n\nAvailable products:\n{json.dumps(catalog)}\n\n'
            'Return only the array of product IDs ranked by relevance to the query.'
        )},
    ])
    return order_by_ids(products, parse_ranked_ids(content))


def rank_products(products, context=None):
    summary = [{
        'id': p.id,
        'name': p.name,
        'price_retail': float(p.price_retail),
        'discount_price': float(p.discount_price) if p.discount_price is not None else None,
        'is_popular': p.is_popular,
        'is_new_arrival': p.is_new_arrival,
        'created_at': p.created_at.isoformat() if p.created_at else None,
    } for p in products]
    content = chat_completion([
        {'role': 'system', 'content': RANK_SYSTEM_PROMPT},
        {'role': 'user', 'content': (
            f'Context: {context or DEFAULT_RANK_CONTEXT}\n\nProducts to rank:\n{json.dumps(summary)}\n\n'
            'Return only the array of product IDs ranked by best recommendation.'
        )},
    ])
    return order_by_ids(products, parse_ranked_ids(content))
