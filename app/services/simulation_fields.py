from __future__ import annotations

"""Field catalogue for the two simulation input forms.

Each form is a flat record of optional string/number fields. The tables below
fix, per form, which section a field belongs to, its display label and its
unit. Section order and field order within a section are the order of the
tables; prompt assembly and result views both walk them as-is.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Iterable, Iterator, Mapping


class SchemaVariant(StrEnum):
    MATERIALS = "materials"
    MINING = "mining"


@dataclass(frozen=True)
class FieldSpec:
    name: str
    label: str
    unit: str | None = None


@dataclass(frozen=True)
class SectionSpec:
    heading: str
    fields: tuple[FieldSpec, ...]

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)


MATERIALS_SECTIONS: tuple[SectionSpec, ...] = (
    SectionSpec(
        "Research Parameters",
        (
            FieldSpec("goal", "Research Goal"),
            FieldSpec("materialType", "Material Type"),
            FieldSpec("composition", "Composition"),
            FieldSpec("conditions", "Experimental Conditions"),
        ),
    ),
    SectionSpec(
        "Application & Targets",
        (
            FieldSpec("application", "Application Area"),
            FieldSpec("targetProperties", "Target Properties"),
            FieldSpec("processingMethod", "Processing Method"),
            FieldSpec("priority", "Priority Focus"),
            FieldSpec("constraints", "Constraints & Limitations"),
        ),
    ),
)

MINING_SECTIONS: tuple[SectionSpec, ...] = (
    SectionSpec(
        "Basic Parameters",
        (
            FieldSpec("template", "Simulation Type"),
            FieldSpec("goal", "Primary Objective"),
            FieldSpec("mineralType", "Mineral Type"),
        ),
    ),
    SectionSpec(
        "Leach Chemistry",
        (
            FieldSpec("pH", "pH Setpoint"),
            FieldSpec("eh", "Redox Potential (Eh)", "mV"),
            FieldSpec("orp", "ORP", "mV"),
            FieldSpec("fe3Concentration", "Ferric Iron (Fe3+) Concentration", "g/L"),
            FieldSpec("fe2Concentration", "Ferrous Iron (Fe2+) Concentration", "g/L"),
            FieldSpec("acidConcentration", "Acid Concentration", "g/L"),
            FieldSpec("oxidantType", "Oxidant / Additives"),
            FieldSpec("oxidantDosage", "Oxidant Dosage", "g/L"),
            FieldSpec("sulfateConcentration", "Sulfate Concentration", "g/L"),
        ),
    ),
    SectionSpec(
        "Mineralogical Inputs",
        (
            FieldSpec("mineralComposition", "Mineral Composition / Assay"),
            FieldSpec("chalcopyritePercent", "Chalcopyrite", "%"),
            FieldSpec("pyritePercent", "Pyrite", "%"),
            FieldSpec("bornitePercent", "Bornite", "%"),
            FieldSpec("alterationMinerals", "Alteration Minerals"),
            FieldSpec("gangueMatrix", "Gangue Matrix"),
        ),
    ),
    SectionSpec(
        "Operational Inputs",
        (
            FieldSpec("residenceTime", "Residence Time", "hours"),
            FieldSpec("grainSize", "Grain Size", "µm"),
            FieldSpec("temperature", "Temperature", "°C"),
            FieldSpec("pulpDensity", "Pulp Density", "%"),
            FieldSpec("particleSize", "Particle Size", "µm"),
            FieldSpec("particleLiberation", "Particle Liberation", "%"),
            FieldSpec("agitationRate", "Agitation / Mixing Rate", "rpm"),
            FieldSpec("pressure", "Pressure", "atm"),
            FieldSpec("reagentSchedule", "Reagent Addition Schedule"),
        ),
    ),
    SectionSpec(
        "Energy Inputs (HVP)",
        (
            FieldSpec("voltage", "Voltage", "kV"),
            FieldSpec("pulseFrequency", "Pulse Frequency", "Hz"),
            FieldSpec("pulseEnergy", "Pulse Energy", "kWh/t"),
            FieldSpec("specificEnergy", "Specific Energy", "kWh/t"),
            FieldSpec("hvpTargetedLiberation", "HVP Targeted Liberation", "%"),
            FieldSpec("fragmentationModel", "Fragmentation Model"),
        ),
    ),
    SectionSpec(
        "Environmental Inputs",
        (
            FieldSpec("atmosphere", "Atmosphere"),
            FieldSpec("leachMedium", "Leach Medium"),
            FieldSpec("dissolvedOxygen", "Dissolved Oxygen", "mg/L"),
            FieldSpec("oxygenFlowRate", "Oxygen Flow Rate", "L/min"),
            FieldSpec("solidToLiquidRatio", "Solid-to-Liquid Ratio"),
            FieldSpec("oxidativePotential", "Oxidative Potential"),
            FieldSpec("redoxControl", "Redox Control"),
            FieldSpec("particleLiberationIndex", "Particle Liberation Index"),
        ),
    ),
    SectionSpec(
        "Advanced Parameters",
        (
            FieldSpec("diffusionCoefficient", "Diffusion Coefficient Adjustments"),
            FieldSpec("shrinkingCoreModel", "Shrinking Core Model Selection"),
            FieldSpec("rateConstantOverride", "Rate Constant (k) Override"),
            FieldSpec("activationEnergy", "Activation Energy Estimate", "kJ/mol"),
            FieldSpec("reactionOrder", "Reaction Order Assumption"),
            FieldSpec("gangueAcidConsumption", "Gangue Acid Consumption (GAC)", "kg/t"),
            FieldSpec("ferricRegenerationEfficiency", "Ferric Regeneration Efficiency", "%"),
            FieldSpec("surfacePassivation", "Surface Passivation Modelling"),
            FieldSpec("particleShapeFactor", "Particle Shape Factor"),
        ),
    ),
    SectionSpec(
        "Additional Information",
        (
            FieldSpec("composition", "Additional Composition Details"),
            FieldSpec("constraints", "Constraints & Limitations"),
        ),
    ),
)

SECTIONS: dict[SchemaVariant, tuple[SectionSpec, ...]] = {
    SchemaVariant.MATERIALS: MATERIALS_SECTIONS,
    SchemaVariant.MINING: MINING_SECTIONS,
}

REQUIRED_FIELDS: dict[SchemaVariant, tuple[str, ...]] = {
    SchemaVariant.MATERIALS: ("goal", "materialType", "composition", "conditions"),
    SchemaVariant.MINING: ("goal",),
}


def field_names(variant: SchemaVariant) -> tuple[str, ...]:
    return tuple(name for section in SECTIONS[variant] for name in section.field_names)


MATERIALS_FIELDS = field_names(SchemaVariant.MATERIALS)
MINING_FIELDS = field_names(SchemaVariant.MINING)
# Fields whose presence alone marks a record as a mining/leach submission.
MINING_ONLY_FIELDS = tuple(f for f in MINING_FIELDS if f not in MATERIALS_FIELDS)


def is_populated(value: Any) -> bool:
    """Return True if a form value counts as supplied.

    ``None``, empty strings and whitespace-only strings are not supplied.
    Numbers (including 0) and non-empty strings are.
    """

    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def infer_variant(fields: Mapping[str, Any]) -> SchemaVariant:
    """Pick the variant of a stored record from which fields carry a value.

    Stored ``input_data`` keeps every field of its form as null when unset,
    so only populated values tell the forms apart.
    """

    if any(is_populated(fields.get(name)) for name in MINING_ONLY_FIELDS):
        return SchemaVariant.MINING
    return SchemaVariant.MATERIALS


def submitted_variant(fields: Mapping[str, Any]) -> SchemaVariant:
    """Pick the variant of a submission from which keys it carries.

    The mining form posts all of its keys, blank or not; the materials form
    never posts a mining-only key.
    """

    if any(name in fields for name in MINING_ONLY_FIELDS):
        return SchemaVariant.MINING
    return SchemaVariant.MATERIALS


def missing_required(fields: Mapping[str, Any], variant: SchemaVariant) -> list[str]:
    return [name for name in REQUIRED_FIELDS[variant] if not is_populated(fields.get(name))]


def iter_populated(
    fields: Mapping[str, Any], variant: SchemaVariant
) -> Iterator[tuple[SectionSpec, list[tuple[FieldSpec, Any]]]]:
    """Yield each section that has supplied values, with those values in table order."""

    for section in SECTIONS[variant]:
        present = [
            (spec, fields[spec.name])
            for spec in section.fields
            if is_populated(fields.get(spec.name))
        ]
        if present:
            yield section, present


def sections_touched(fields: Mapping[str, Any], variant: SchemaVariant) -> list[str]:
    return [section.heading for section, _ in iter_populated(fields, variant)]


def normalize_input(
    fields: Mapping[str, Any], variant: SchemaVariant, extra: Iterable[str] = ()
) -> dict[str, Any]:
    """Build the stored ``input_data``: every variant field, unsupplied ones as None."""

    names = list(field_names(variant)) + [n for n in extra if n not in field_names(variant)]
    data: dict[str, Any] = {}
    for name in names:
        value = fields.get(name)
        data[name] = value if is_populated(value) else None
    return data
