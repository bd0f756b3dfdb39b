from __future__ import annotations

from behat_exposer.core.feature import FeatureFile
from behat_exposer.core.parameters import DocCommentParameterParser, Parameter, ParameterParser
from behat_exposer.core.renderers import ParameterRendererFactory


class TemplateInterfaceGenerator:
    """Builds the HTML form fragment that collects a template's parameters."""

    def __init__(
        self,
        factory: ParameterRendererFactory | None = None,
        parser: ParameterParser | None = None,
    ) -> None:
        self._factory = factory or ParameterRendererFactory()
        self._parser = parser or DocCommentParameterParser()

    def execute(self, feature_file: FeatureFile) -> str:
        parameters = self._parser.extract_parameters(feature_file.test_scenarios)
        return self.render(parameters)

    def render(self, parameters: dict[str, Parameter]) -> str:
        elements = []
        for key, parameter in parameters.items():
            renderer = self._factory.create(parameter.type)
            elements.append(renderer.render(key, parameter.type, parameter.name, parameter.options()))
        return "".join(elements)
