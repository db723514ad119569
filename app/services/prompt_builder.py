from __future__ import annotations

from typing import Any, Mapping

from app.services.simulation_fields import FieldSpec, SchemaVariant, iter_populated


SYSTEM_PROMPTS: dict[SchemaVariant, str] = {
    SchemaVariant.MATERIALS: (
        "You are a scientific simulation expert. Provide detailed, accurate technical "
        "reports with numerical data for visualization."
    ),
    SchemaVariant.MINING: (
        "You are a hydrometallurgy and mineral processing simulation expert. Provide "
        "detailed, accurate technical reports with numerical data for visualization. "
        "Respond with JSON only."
    ),
}

_PREAMBLES: dict[SchemaVariant, str] = {
    SchemaVariant.MATERIALS: """Given the following research objective and parameters, generate a comprehensive technical simulation report including:

- Detailed process summary
- Recommended method with justification
- Predicted temperature/efficiency data (provide at least 5-7 numerical data points for visualization)
- Material properties over temperature (hardness, strength, conductivity - at least 5-7 data points)
- Target property predictions based on input parameters
- Optimization recommendations
- Confidence score (0-1)""",
    SchemaVariant.MINING: """Given the following mineral processing objective and process parameters, generate a comprehensive leach/process simulation report including:

- Detailed process summary covering dissolution behaviour and key findings
- Recommended process route with justification
- Metal recovery over time (provide at least 8-10 numerical data points for visualization)
- Solution chemistry profiles over time: pH, redox potential (mV) and Fe3+/Fe2+ ratio
- Kinetics analysis: rate constant (h^-1), reaction order, activation energy (kJ/mol), half-life (hours)
- Optimization recommendations
- Confidence score (0-1)""",
}

_OUTPUT_CONTRACTS: dict[SchemaVariant, str] = {
    SchemaVariant.MATERIALS: """Please format the response as JSON with the following structure:
{
  "processSummary": "Detailed summary of the simulation process and key findings...",
  "recommendedMethod": "Recommended processing/experimental method with reasoning...",
  "temperatureData": [{"temperature": number, "efficiency": number}, ...],
  "materialPropertiesData": [{"temperature": number, "hardness": number, "strength": number, "conductivity": number}, ...],
  "confidenceScore": number (0-1),
  "predictions": {
    "predictedProperties": {...},
    "optimizationTips": [...]
  }
}""",
    SchemaVariant.MINING: """Please format the response as JSON with the following structure:
{
  "processSummary": "Detailed summary of the simulated process and key findings...",
  "recommendedMethod": "Recommended process route with reasoning...",
  "recoveryData": [{"time": number (hours), "recovery": number (%), "grade": number (optional)}, ...],
  "chemistryProfiles": {
    "pH": [{"time": number, "pH": number}, ...],
    "eh": [{"time": number, "eh": number}, ...],
    "fe3Fe2Ratio": [{"time": number, "ratio": number}, ...]
  },
  "kineticsAnalysis": {
    "rateConstant": number,
    "reactionOrder": number,
    "activationEnergy": number,
    "halfLife": number
  },
  "confidenceScore": number (0-1),
  "predictions": {
    "finalRecovery": number,
    "optimizationTips": [...]
  }
}""",
}


def format_field_line(spec: FieldSpec, value: Any) -> str:
    """Render one supplied field as ``Label: value[ unit]``; the value is used verbatim."""

    text = value if isinstance(value, str) else str(value)
    if spec.unit:
        return f"{spec.label}: {text} {spec.unit}"
    return f"{spec.label}: {text}"


def build_prompt_details(fields: Mapping[str, Any], variant: SchemaVariant) -> str:
    """Return the parameter block: a heading per touched section, one line per supplied field.

    Args:
        fields: Submitted flat record.
        variant: Which field table to walk.

    Returns:
        Newline-joined block. Sections without supplied fields are omitted
        entirely, as are unsupplied fields.
    """

    lines: list[str] = []
    for section, present in iter_populated(fields, variant):
        if lines:
            lines.append("")
        lines.append(f"### {section.heading}")
        lines.extend(format_field_line(spec, value) for spec, value in present)
    return "\n".join(lines)


def build_prompt(fields: Mapping[str, Any], variant: SchemaVariant) -> str:
    """Assemble the full user prompt for the model.

    Args:
        fields: Submitted flat record.
        variant: Form variant of the record.

    Returns:
        Preamble, parameter block and the JSON output contract for the variant.
    """

    details = build_prompt_details(fields, variant)
    return f"{_PREAMBLES[variant]}\n\n{details}\n\n{_OUTPUT_CONTRACTS[variant]}"
