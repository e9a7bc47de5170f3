"""Tests for the agent-facing search and schema tools."""

import pytest

from medusa_openapi_search.config.settings import SearchConfig
from medusa_openapi_search.parser.models import HttpMethod, Operation, Parameter
from medusa_openapi_search.server.exceptions import ResourceNotFoundError, ValidationError
from medusa_openapi_search.server.tools import (
    SCHEMA_TOOL,
    SEARCH_TOOL,
    OpenApiTools,
    build_query_param_hints,
    summarize_params,
)


@pytest.fixture
def tools(registry, search_config):
    return OpenApiTools(registry, search_config)


class TestSearchTool:
    """Test cases for openapi.search."""

    def test_projection(self, tools):
        results = tools.search_operations({"query": "what active promotions do I have"})

        assert results[0] == {
            "operationId": "AdminGetPromotions",
            "method": "get",
            "path": "/admin/promotions",
            "summary": "List Promotions",
            "tags": ["Promotions"],
            "pathParams": [],
            "queryParams": [
                {
                    "name": "q",
                    "in": "query",
                    "type": "string",
                    "description": "Search term to filter promotions by",
                },
                {
                    "name": "fields",
                    "in": "query",
                    "type": "string",
                    "description": "Comma-separated fields to include.",
                },
            ],
        }

    def test_duplicate_path_params_are_reported(self, tools):
        results = tools.search_operations(
            {"query": "promotions", "methods": ["get"], "limit": 2}
        )
        by_id = {entry["operationId"]: entry for entry in results}

        assert [p["name"] for p in by_id["AdminGetPromotionsId"]["pathParams"]] == [
            "id",
            "id",
        ]

    def test_filters_and_limit(self, tools):
        results = tools.search_operations(
            {"query": "admin", "tags": ["orders", "products"], "limit": 2}
        )

        assert len(results) == 2
        assert all(set(r["tags"]) & {"Orders", "Products"} for r in results)

    def test_methods_are_case_insensitive(self, tools):
        results = tools.search_operations({"query": "promotions", "methods": ["POST"]})
        assert [r["operationId"] for r in results] == ["AdminPostPromotions"]

    def test_default_limit(self, tools):
        assert len(tools.search_operations({"query": "admin"})) == 10

    @pytest.mark.parametrize("arguments", [{}, {"query": ""}, {"query": "  "}, {"query": 5}])
    def test_query_required(self, tools, arguments):
        with pytest.raises(ValidationError) as exc_info:
            tools.search_operations(arguments)

        assert exc_info.value.code == -32602
        assert exc_info.value.data["parameter"] == "query"

    def test_invalid_method(self, tools):
        with pytest.raises(ValidationError) as exc_info:
            tools.search_operations({"query": "orders", "methods": ["fetch"]})

        assert exc_info.value.data["parameter"] == "methods"
        assert exc_info.value.data["suggestions"] == [m.value for m in HttpMethod]

    def test_methods_must_be_list(self, tools):
        with pytest.raises(ValidationError):
            tools.search_operations({"query": "orders", "methods": "get"})

    def test_tags_must_be_strings(self, tools):
        with pytest.raises(ValidationError) as exc_info:
            tools.search_operations({"query": "orders", "tags": ["Orders", 3]})

        assert exc_info.value.data["parameter"] == "tags"

    @pytest.mark.parametrize("limit", [0, 51, "5", True, 2.5])
    def test_invalid_limit(self, tools, limit):
        with pytest.raises(ValidationError) as exc_info:
            tools.search_operations({"query": "orders", "limit": limit})

        assert exc_info.value.data["parameter"] == "limit"

    def test_max_limit_from_config(self, registry):
        tools = OpenApiTools(registry, SearchConfig(max_tool_limit=5))

        assert len(tools.search_operations({"query": "admin", "limit": 5})) == 5
        with pytest.raises(ValidationError):
            tools.search_operations({"query": "admin", "limit": 6})


class TestSchemaTool:
    """Test cases for openapi.schema."""

    def test_path_parameters_and_example_path(self, tools):
        view = tools.get_operation_schema({"operationId": "AdminGetPromotionsId"})

        assert view["method"] == "get"
        assert view["examplePath"] == "/admin/promotions/:id"
        assert view["exampleUrl"] is None
        assert [p["name"] for p in view["pathParams"]] == ["id", "id"]
        assert view["pathParams"][1]["description"] == "The promotion's ID."
        assert view["requestBodySchema"] is None
        assert view["bodyFieldExamples"] == {}
        assert view["requiredBodyFields"] == []

    def test_query_param_hints(self, tools):
        view = tools.get_operation_schema({"operationId": "AdminGetProducts"})

        assert view["queryParamHints"] == [
            {
                "name": "created_at",
                "operators": ["$gte", "$lte"],
                "example": (
                    "created_at[$gte]=2025-01-01T00:00:00Z"
                    "&created_at[$lte]=2025-12-31T23:59:59Z"
                ),
            }
        ]
        assert view["exampleUrl"] == (
            "/admin/products?created_at[$gte]=2025-01-01T00:00:00Z"
            "&created_at[$lte]=2025-12-31T23:59:59Z"
        )
        assert [p["name"] for p in view["headerParams"]] == ["x-publishable-api-key"]

    def test_request_body_metadata(self, tools):
        view = tools.get_operation_schema({"operationId": "AdminPostPromotions"})

        assert view["requestBodySchema"] == {
            "$ref": "#/components/schemas/CreatePromotion"
        }
        assert view["bodyFieldExamples"]["code"] == "SUMMER10"
        assert view["bodyFieldEnums"]["application_method.type"] == [
            "fixed",
            "percentage",
        ]
        assert view["requiredBodyFields"] == ["code", "type", "application_method.type"]

    def test_unknown_operation(self, tools):
        with pytest.raises(ResourceNotFoundError) as exc_info:
            tools.get_operation_schema({"operationId": "AdminGetPromotion"})

        error = exc_info.value
        assert error.code == -1001
        assert error.message == "Unknown operationId: AdminGetPromotion"
        assert error.data["identifier"] == "AdminGetPromotion"
        assert error.data["suggestions"] == [
            "AdminGetPromotionsId",
            "AdminPostPromotions",
            "AdminDeletePromotionsId",
        ]

    def test_operation_id_required(self, tools):
        with pytest.raises(ValidationError):
            tools.get_operation_schema({})


class TestToolDefinitions:
    """Test cases for tool registration."""

    def test_definitions(self, tools):
        definitions = {tool.name: tool for tool in tools.tool_definitions()}

        assert set(definitions) == {SEARCH_TOOL, SCHEMA_TOOL}
        search_schema = definitions[SEARCH_TOOL].inputSchema
        assert search_schema["required"] == ["query"]
        assert search_schema["properties"]["limit"]["maximum"] == 50
        assert definitions[SCHEMA_TOOL].inputSchema["required"] == ["operationId"]

    def test_handlers(self, tools):
        assert set(tools.handlers) == {SEARCH_TOOL, SCHEMA_TOOL}


def test_summarize_params_omits_missing_values():
    params = [Parameter(name="id", location="path", required=True)]
    assert summarize_params(params) == [{"name": "id", "in": "path", "required": True}]


def test_query_param_hints_eq_operator():
    operation = Operation(
        operation_id="AdminGetRegions",
        method=HttpMethod.GET,
        path="/admin/regions",
        parameters=(
            Parameter(
                name="currency_code",
                location="query",
                schema_={"type": "object", "properties": {"$eq": {}, "$ne": {}}},
            ),
            Parameter(name="q", location="query", schema_={"type": "string"}),
        ),
    )

    assert build_query_param_hints(operation) == [
        {
            "name": "currency_code",
            "operators": ["$eq", "$ne"],
            "example": "currency_code[$eq]=value",
        }
    ]
