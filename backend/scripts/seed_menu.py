#!/usr/bin/env python3
"""
Seed categories, products and option groups from a JSON file, or from the
built-in sample menu when no file is given.

Usage:
    python scripts/seed_menu.py
    python scripts/seed_menu.py --file ./menu.json

The JSON layout mirrors the admin API payloads:
    {"categories": [{"name", "slug", "sort_order",
                     "products": [ProductIn without category_id, ...]}]}
"""
import argparse
import copy
import json
import logging
import os
import sys

# allow running from repo/scripts
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from storefront.db import SessionLocal, init_db
from storefront.models.menu import Category
from storefront.schemas.product_schema import CategoryIn, ProductIn
from storefront.services.catalogue_service import CatalogueService

log = logging.getLogger("seed_menu")

DONENESS = {
    "name": "Ponto da Carne",
    "is_required": True,
    "min_selections": 1,
    "max_selections": 1,
    "options": [
        {"name": "Mal Passado", "extra_price_cents": 0, "sort_order": 1},
        {"name": "Ao Ponto", "extra_price_cents": 0, "sort_order": 2},
        {"name": "Bem Passado", "extra_price_cents": 0, "sort_order": 3},
    ],
}

SAMPLE_MENU = {
    "categories": [
        {
            "name": "Hambúrgueres",
            "slug": "hamburgueres",
            "sort_order": 1,
            "products": [
                {
                    "name": "X-Bacon Artesanal",
                    "description": "Hambúrguer artesanal 180g, cheddar, bacon crocante e molho especial",
                    "price_cents": 3290,
                    "is_popular": True,
                    "preparation_time": 20,
                    "option_groups": [
                        DONENESS,
                        {
                            "name": "Adicionais",
                            "min_selections": 0,
                            "max_selections": 5,
                            "sort_order": 2,
                            "options": [
                                {"name": "Bacon Extra", "extra_price_cents": 500, "sort_order": 1},
                                {"name": "Queijo Extra", "extra_price_cents": 400, "sort_order": 2},
                                {"name": "Ovo", "extra_price_cents": 300, "sort_order": 3},
                                {"name": "Cebola Caramelizada", "extra_price_cents": 350, "sort_order": 4},
                            ],
                        },
                    ],
                },
                {
                    "name": "X-Salada Classic",
                    "description": "Hambúrguer 150g, queijo, alface, tomate, cebola e maionese",
                    "price_cents": 2490,
                    "is_popular": True,
                    "preparation_time": 15,
                    "option_groups": [DONENESS],
                },
            ],
        },
        {
            "name": "Pizzas",
            "slug": "pizzas",
            "sort_order": 2,
            "products": [
                {
                    "name": "Pizza Margherita",
                    "description": "Molho de tomate, mussarela, tomate e manjericão fresco",
                    "price_cents": 4590,
                    "preparation_time": 30,
                    "option_groups": [
                        {
                            "name": "Borda",
                            "max_selections": 1,
                            "options": [
                                {"name": "Borda Tradicional", "extra_price_cents": 0},
                                {"name": "Borda Catupiry", "extra_price_cents": 800},
                                {"name": "Borda Cheddar", "extra_price_cents": 800},
                            ],
                        }
                    ],
                }
            ],
        },
        {
            "name": "Bebidas",
            "slug": "bebidas",
            "sort_order": 3,
            "products": [
                {
                    "name": "Refrigerante",
                    "price_cents": 690,
                    "preparation_time": 0,
                    "option_groups": [
                        {
                            "name": "Tamanho",
                            "is_required": True,
                            "min_selections": 1,
                            "max_selections": 1,
                            "options": [
                                {"name": "350ml", "extra_price_cents": 0},
                                {"name": "600ml", "extra_price_cents": 300},
                                {"name": "2L", "extra_price_cents": 700},
                            ],
                        }
                    ],
                }
            ],
        },
    ]
}


def seed(data: dict) -> int:
    init_db()
    db = SessionLocal()
    svc = CatalogueService(db)
    created = 0
    try:
        for entry in data.get("categories", []):
            products = entry.pop("products", [])
            category = db.query(Category).filter(Category.slug == entry["slug"]).first()
            if category is None:
                category = svc.create_category(CategoryIn(**entry))
            elif svc.list_products(category_id=category.id, include_inactive=True):
                log.info("category %s already stocked, skipping", category.slug)
                continue
            for p in products:
                svc.create_product(ProductIn(category_id=category.id, **p))
                created += 1
        return created
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    parser = argparse.ArgumentParser()
    parser.add_argument("--file", "-f", default=None, help="Path to a menu JSON file")
    args = parser.parse_args()
    if args.file:
        if not os.path.exists(args.file):
            print("File not found:", args.file)
            sys.exit(1)
        with open(args.file, "r", encoding="utf-8") as f:
            payload = json.load(f)
    else:
        payload = copy.deepcopy(SAMPLE_MENU)
    print("Seeded products:", seed(payload))
