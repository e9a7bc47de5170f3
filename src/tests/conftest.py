"""Pytest configuration and shared fixtures."""

import copy
import json
from pathlib import Path
from typing import Any, Dict

import pytest

from medusa_openapi_search.config.settings import SearchConfig, Settings
from medusa_openapi_search.search.registry import OpenApiRegistry, OperationCatalog

MEDUSA_ADMIN_DOCUMENT: Dict[str, Any] = {
    "openapi": "3.1.0",
    "info": {"title": "Medusa Admin API", "version": "2.0.0"},
    "paths": {
        "/admin/promotions": {
            "get": {
                "operationId": "AdminGetPromotions",
                "summary": "List Promotions",
                "description": (
                    "Retrieve the list of promotions. The promotions can be "
                    "filtered by fields such as `id`."
                ),
                "tags": ["Promotions"],
                "parameters": [
                    {
                        "name": "q",
                        "in": "query",
                        "description": "Search term to filter promotions by",
                        "schema": {"type": "string"},
                    },
                    {"$ref": "#/components/parameters/fields"},
                ],
            },
            "post": {
                "operationId": "AdminPostPromotions",
                "summary": "Create Promotion",
                "description": "Create promotion with the given rules.",
                "tags": ["Promotions"],
                "requestBody": {
                    "content": {
                        "application/json": {
                            "schema": {"$ref": "#/components/schemas/CreatePromotion"}
                        }
                    }
                },
            },
        },
        "/admin/promotions/{id}": {
            "parameters": [
                {
                    "name": "id",
                    "in": "path",
                    "required": True,
                    "schema": {"type": "string"},
                }
            ],
            "get": {
                "operationId": "AdminGetPromotionsId",
                "summary": "Get Promotion",
                "description": "Retrieve promotion by its ID.",
                "tags": ["Promotions"],
                "parameters": [
                    {
                        "name": "id",
                        "in": "path",
                        "required": True,
                        "description": "The promotion's ID.",
                        "schema": {"type": "string"},
                    },
                    {"$ref": "#/components/parameters/fields"},
                ],
            },
            "delete": {
                "operationId": "AdminDeletePromotionsId",
                "summary": "Delete Promotion",
                "tags": ["Promotions"],
            },
        },
        "/admin/campaigns": {
            "get": {
                "operationId": "AdminGetCampaigns",
                "summary": "List Campaigns",
                "description": "Retrieve the list of campaigns.",
                "tags": ["Campaigns"],
            }
        },
        "/admin/products": {
            "get": {
                "operationId": "AdminGetProducts",
                "summary": "List Products",
                "description": "Retrieve the list of products.",
                "tags": ["Products"],
                "parameters": [
                    {
                        "name": "created_at",
                        "in": "query",
                        "description": "Filter by creation date.",
                        "schema": {
                            "type": "object",
                            "properties": {
                                "$gte": {"type": "string"},
                                "$lte": {"type": "string"},
                            },
                        },
                    },
                    {
                        "name": "x-publishable-api-key",
                        "in": "header",
                        "schema": {"type": "string"},
                    },
                ],
            },
            "post": {
                "operationId": "AdminPostProducts",
                "summary": "Create Product",
                "tags": ["Products"],
            },
        },
        "/admin/orders": {
            "get": {
                "operationId": "AdminGetOrders",
                "summary": "List Orders",
                "description": "Retrieve the list of orders.",
                "tags": ["Orders"],
            }
        },
        "/admin/fulfillments/{id}/cancel": {
            "post": {
                "operationId": "AdminPostFulfillmentsIdCancel",
                "summary": "Cancel a Fulfillment",
                "description": "Cancel fulfillment and release its reserved items.",
                "tags": ["Fulfillments"],
                "parameters": [
                    {"name": "id", "in": "path", "required": True},
                ],
            }
        },
        "/admin/stores/{id}": {
            "get": {
                "summary": "Get Store",
                "tags": ["Stores"],
            },
            "put": "not an operation object",
        },
        "/admin/broken": "this path item is malformed",
    },
    "components": {
        "parameters": {
            "fields": {
                "name": "fields",
                "in": "query",
                "description": "Comma-separated fields to include.",
                "schema": {"type": "string"},
            }
        },
        "schemas": {
            "CreatePromotion": {
                "type": "object",
                "required": ["code", "type"],
                "properties": {
                    "code": {"type": "string", "example": "SUMMER10"},
                    "type": {"type": "string", "enum": ["standard", "buyget"]},
                    "status": {
                        "type": "string",
                        "enum": ["draft", "active"],
                    },
                    "created_at": {"type": "string", "readOnly": True},
                    "application_method": {
                        "$ref": "#/components/schemas/ApplicationMethod"
                    },
                },
            },
            "ApplicationMethod": {
                "type": "object",
                "required": ["type"],
                "properties": {
                    "type": {"type": "string", "enum": ["fixed", "percentage"]},
                    "value": {"type": "number", "example": 10},
                },
            },
        },
    },
}

# Document order after parsing; malformed entries are dropped
MEDUSA_OPERATION_IDS = [
    "AdminGetPromotions",
    "AdminPostPromotions",
    "AdminGetPromotionsId",
    "AdminDeletePromotionsId",
    "AdminGetCampaigns",
    "AdminGetProducts",
    "AdminPostProducts",
    "AdminGetOrders",
    "AdminPostFulfillmentsIdCancel",
    "GET_/admin/stores/{id}",
]


@pytest.fixture
def medusa_document() -> Dict[str, Any]:
    """Provide a small Medusa admin style OpenAPI document."""
    return copy.deepcopy(MEDUSA_ADMIN_DOCUMENT)


@pytest.fixture
def openapi_file(tmp_path: Path, medusa_document: Dict[str, Any]) -> Path:
    """Write the sample document to a temporary JSON file."""
    path = tmp_path / "medusa-admin.json"
    path.write_text(json.dumps(medusa_document), encoding="utf-8")
    return path


@pytest.fixture
def search_config() -> SearchConfig:
    """Search configuration with default ranking constants."""
    return SearchConfig()


@pytest.fixture
def catalog(medusa_document, search_config) -> OperationCatalog:
    """Catalog indexed from the sample document."""
    return OperationCatalog.from_document(medusa_document, search_config)


@pytest.fixture
def registry(medusa_document, search_config) -> OpenApiRegistry:
    """Registry serving the sample document."""
    return OpenApiRegistry.from_document(medusa_document, search_config)


@pytest.fixture
def settings() -> Settings:
    """Application settings with defaults."""
    return Settings()


@pytest.fixture
def operation_ids():
    """Operation ids of the sample document in document order."""
    return list(MEDUSA_OPERATION_IDS)
