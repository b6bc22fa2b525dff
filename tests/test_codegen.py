"""Tests for the codegen module: rendering, reports and writing."""

import pytest

from swagsharp import codegen
from swagsharp.codegen import generate, write_artifacts
from swagsharp.config import GeneratorConfig
from swagsharp.loader import load_spec


class TestScenario:
    """One enum, one object, one tagged GET endpoint."""

    @pytest.fixture(autouse=True)
    def _generate(self, scenario_spec):
        self.report = generate(scenario_spec)
        self.files = self.report.by_path()

    def test_artifact_paths(self):
        assert sorted(self.files) == [
            "Models/Orders/Order.cs",
            "Models/Statuses/Enums/Status.cs",
            "Services/Implementations/OrdersService.cs",
            "Services/Interfaces/IOrdersService.cs",
        ]

    def test_no_diagnostics(self):
        assert self.report.diagnostics == []

    def test_enum(self):
        assert self.files["Models/Statuses/Enums/Status.cs"] == (
            "namespace GeneratedCode.Models.Statuses.Enums;\n"
            "\n"
            "public enum Status\n"
            "{\n"
            "    Active = 0,\n"
            "    Inactive = 1\n"
            "}\n"
        )

    def test_record(self):
        content = self.files["Models/Orders/Order.cs"]
        assert content.startswith("using System.Text.Json.Serialization;\n\nnamespace GeneratedCode.Models.Orders;\n")
        assert "public record Order\n{\n" in content
        assert '    [JsonPropertyName("id")]\n    public int Id { get; set; } = default;\n' in content
        assert '    [JsonPropertyName("note")]\n    public string? Note { get; set; }\n' in content

    def test_interface(self):
        content = self.files["Services/Interfaces/IOrdersService.cs"]
        assert "using GeneratedCode.Models.Orders;\n" in content
        assert "namespace GeneratedCode.Services.Interfaces;\n" in content
        assert "public interface IOrdersService\n" in content
        assert "    Task<Order> GetOrderAsync(int id);\n" in content

    def test_implementation(self):
        content = self.files["Services/Implementations/OrdersService.cs"]
        assert "using GeneratedCode.Services.Interfaces;\n" in content
        assert "public class OrdersService : IOrdersService\n" in content
        assert "    private readonly IHttpClientService _httpClient;\n" in content
        assert "    public async Task<Order> GetOrderAsync(int id)\n" in content
        assert '        var response = await _httpClient.GetAsync<Order>($"/orders/{id}");\n' in content
        assert "        return response.Result;\n" in content


class TestSampleSpec:
    """Generate from the bundled sample document."""

    @classmethod
    def setup_class(cls):
        cls.report = generate(load_spec())
        cls.files = cls.report.by_path()

    def test_artifact_count(self):
        assert len(self.report.artifacts) == 13

    def test_model_folders(self):
        assert "Models/Orders/OrderItem.cs" in self.files
        assert "Models/Orders/CreateOrderRequest.cs" in self.files
        assert "Models/Users/UserDto.cs" in self.files
        assert "Models/Users/UserFilterDto.cs" in self.files
        assert "Models/Metadata/Metadata.cs" in self.files

    def test_diagnostics(self):
        assert self.report.errors == []
        assert [str(d) for d in self.report.warnings] == [
            "warning: GET /health: missing 'tags' or 'operationId'",
            "warning: Orders: PATCH /orders/{id}: HTTP method PATCH has no client call; method throws",
        ]

    def test_record_usings(self):
        content = self.files["Models/Orders/Order.cs"]
        assert content.startswith(
            "using System;\n"
            "using System.Collections.Generic;\n"
            "using System.Text.Json.Serialization;\n"
            "using GeneratedCode.Models.Statuses.Enums;\n"
            "using GeneratedCode.Models.Users;\n"
        )

    def test_record_types(self):
        content = self.files["Models/Orders/Order.cs"]
        assert "public long Id { get; set; } = default;" in content
        assert "public Status? Status { get; set; }" in content
        assert "public List<OrderItem>? Items { get; set; }" in content
        assert "public DateTime? CreatedAt { get; set; }" in content
        assert "public Dictionary<string, string>? Attributes { get; set; }" in content
        assert "    /// Free-form note\n" in content

    def test_requiredness(self):
        content = self.files["Models/Orders/OrderItem.cs"]
        assert "public string Sku { get; set; } = default;" in content
        assert "public int Quantity { get; set; } = default;" in content
        assert "public decimal? Price { get; set; }" in content

    def test_enum_summary(self):
        content = self.files["Models/Statuses/Enums/Status.cs"]
        assert "/// <summary>\n/// Lifecycle state of an order\n/// </summary>\npublic enum Status\n" in content

    def test_wrapper(self):
        content = self.files["Models/Orders/OrderNumber.cs"]
        assert "public record OrderNumber\n" in content
        assert "    public string Value { get; set; }\n" in content

    def test_fallback(self):
        content = self.files["Models/Metadata/Metadata.cs"]
        assert "/// Arbitrary metadata\n" in content
        assert "    // This is a fallback model\n" in content

    def test_orders_interface(self):
        content = self.files["Services/Interfaces/IOrdersService.cs"]
        for signature in (
            "Task<Order> GetOrderAsync(long id);",
            "Task<Order> UpdateOrderAsync(long id, UpdateOrderRequest request);",
            "Task DeleteOrderAsync(long id);",
            "Task PatchOrderAsync(long id);",
            "Task<List<Order>> ListOrdersAsync(string? status, int? page);",
            "Task<Order> CreateOrderAsync(CreateOrderRequest request);",
        ):
            assert f"    {signature}\n" in content

    def test_orders_implementation_calls(self):
        content = self.files["Services/Implementations/OrdersService.cs"]
        assert 'await _httpClient.PutAsync<UpdateOrderRequest, Order>($"/orders/{id}", request);' in content
        assert 'await _httpClient.DeleteAsync<bool>($"/orders/{id}");' in content
        assert 'await _httpClient.GetAsync<List<Order>>($"/orders?status={status}&page={page}");' in content
        assert 'await _httpClient.PostAsync<CreateOrderRequest, Order>("/orders", request);' in content
        assert 'throw new NotSupportedException("PATCH /orders/{id} is not supported by IHttpClientService");' \
            in content
        assert content.startswith("using System;\n")

    def test_cleaned_service_name(self):
        content = self.files["Services/Interfaces/IUserService.cs"]
        assert "public interface IUserService\n" in content
        assert "using GeneratedCode.Models.Users;\n" in content
        assert "Task<UserDto> GetUserAsync(string userId);" in content

    def test_idempotent(self):
        again = generate(load_spec())
        assert again.by_path() == self.files
        assert again.diagnostics == self.report.diagnostics


class TestConfig:

    def test_custom_namespaces(self, scenario_spec):
        config = GeneratorConfig(models_namespace="Acme.Models", services_namespace="Acme.Api")
        files = generate(scenario_spec, config).by_path()
        assert "namespace Acme.Models.Orders;\n" in files["Models/Orders/Order.cs"]
        interface = files["Services/Interfaces/IOrdersService.cs"]
        assert "namespace Acme.Api.Interfaces;\n" in interface
        assert "using Acme.Models.Orders;\n" in interface

    def test_keep_version(self, sample_spec):
        config = GeneratorConfig(remove_version=False)
        files = generate(sample_spec, config).by_path()
        assert "Services/Interfaces/IUserv2Service.cs" in files

    def test_http_client(self, scenario_spec):
        config = GeneratorConfig(http_client_interface="IApiClient", http_client_namespace="Acme.Http")
        content = generate(scenario_spec, config).by_path()["Services/Implementations/OrdersService.cs"]
        assert "using Acme.Http;\n" in content
        assert "    public OrdersService(IApiClient httpClient)\n" in content


class TestFailureIsolation:
    """One failing item never stops the others."""

    def test_model_failure(self, scenario_spec, monkeypatch):
        real = codegen.build_model_context

        def failing(descriptor, index):
            if descriptor.name == "Status":
                raise ValueError("boom")
            return real(descriptor, index)

        monkeypatch.setattr(codegen, "build_model_context", failing)
        report = generate(scenario_spec)
        paths = set(report.by_path())
        assert "Models/Statuses/Enums/Status.cs" not in paths
        assert "Models/Orders/Order.cs" in paths
        assert "Services/Interfaces/IOrdersService.cs" in paths
        [error] = report.errors
        assert error.item == "Status"
        assert error.message == "model generation failed: boom"

    def test_method_failure(self, scenario_spec, monkeypatch):
        scenario_spec["paths"]["/orders"] = {"get": {
            "tags": ["Orders"],
            "operationId": "listOrders",
            "responses": {"200": {"schema": {"type": "array", "items": {"$ref": "#/definitions/Order"}}}},
        }}
        real = codegen.build_method_context

        def failing(endpoint, owner, used):
            if endpoint.operation_id == "listOrders":
                raise KeyError("bad")
            return real(endpoint, owner, used)

        monkeypatch.setattr(codegen, "build_method_context", failing)
        report = generate(scenario_spec)
        interface = report.by_path()["Services/Interfaces/IOrdersService.cs"]
        assert "GetOrderAsync" in interface
        assert "ListOrdersAsync" not in interface
        assert len(report.errors) == 1

    def test_service_failure(self, scenario_spec, monkeypatch):
        scenario_spec["paths"]["/users"] = {"get": {"tags": ["Users"], "operationId": "listUsers"}}

        def failing(service_name, *args):
            if service_name == "Orders":
                raise RuntimeError("broken")
            return real(service_name, *args)

        real = codegen.build_service_context
        monkeypatch.setattr(codegen, "build_service_context", failing)
        report = generate(scenario_spec)
        paths = set(report.by_path())
        assert "Services/Interfaces/IUsersService.cs" in paths
        assert "Services/Interfaces/IOrdersService.cs" not in paths
        assert [e.item for e in report.errors] == ["Orders"]

    def test_duplicate_service_names(self, scenario_spec):
        scenario_spec["paths"]["/legacy"] = {"get": {
            "tags": ["orders-resource"], "operationId": "legacy",
        }}
        report = generate(scenario_spec)
        assert "Services/Interfaces/IOrders1Service.cs" in report.by_path()
        assert any("Orders1" in d.message for d in report.warnings)


class TestUnusualInput:
    """Inputs that must still produce well-formed sources."""

    def test_multiline_parameter_description(self, scenario_spec):
        [param] = scenario_spec["paths"]["/orders/{id}"]["get"]["parameters"]
        param["description"] = "Order id.\nMust be positive."
        files = generate(scenario_spec).by_path()
        for path in ("Services/Interfaces/IOrdersService.cs", "Services/Implementations/OrdersService.cs"):
            lines = files[path].splitlines()
            assert '    /// <param name="id">Order id. Must be positive.</param>' in lines
            assert "Must be positive.</param>" not in lines

    def test_yaml_integer_definition_key(self, tmp_path):
        path = tmp_path / "api.yaml"
        path.write_text(
            "swagger: '2.0'\n"
            "paths: {}\n"
            "definitions:\n"
            "  404:\n"
            "    type: object\n"
            "  Order:\n"
            "    type: object\n"
            "    properties:\n"
            "      200:\n"
            "        type: string\n",
            encoding="utf-8",
        )
        report = generate(load_spec(path))
        assert report.errors == []
        files = report.by_path()
        assert "Models/Model404s/Model404.cs" in files
        assert '[JsonPropertyName("200")]\n    public string? _200 { get; set; }' in files["Models/Orders/Order.cs"]

    def test_wrapper_named_value(self, scenario_spec):
        scenario_spec["definitions"]["Value"] = {"type": "integer"}
        content = generate(scenario_spec).by_path()["Models/Values/Value.cs"]
        assert "public record Value\n" in content
        assert "    public int ValueValue { get; set; }\n" in content

    def test_model_names_differing_only_by_case(self, scenario_spec):
        scenario_spec["definitions"]["order"] = {"type": "object", "properties": {"id": {"type": "string"}}}
        report = generate(scenario_spec)
        lowered = [p.lower() for p in report.by_path()]
        assert len(lowered) == len(set(lowered))
        assert "Models/Orders/order1.cs" in report.by_path()

    def test_service_names_differing_only_by_case(self, scenario_spec):
        scenario_spec["paths"]["/legacy"] = {"get": {"tags": ["ORDERS"], "operationId": "legacy"}}
        files = generate(scenario_spec).by_path()
        assert "Services/Interfaces/IOrdersService.cs" in files
        assert "Services/Interfaces/IORDERS1Service.cs" in files


class TestWriteArtifacts:

    def test_writes_tree(self, scenario_spec, tmp_path):
        report = generate(scenario_spec)
        written = write_artifacts(report, tmp_path)
        assert len(written) == 4
        target = tmp_path / "Models" / "Statuses" / "Enums" / "Status.cs"
        assert target.read_text(encoding="utf-8") == report.by_path()["Models/Statuses/Enums/Status.cs"]

    def test_overwrites(self, scenario_spec, tmp_path):
        report = generate(scenario_spec)
        write_artifacts(report, tmp_path)
        write_artifacts(report, tmp_path)
        assert len(list(tmp_path.rglob("*.cs"))) == 4
