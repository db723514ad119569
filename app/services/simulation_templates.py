from __future__ import annotations

from dataclasses import dataclass, field

from app.services.simulation_fields import MINING_FIELDS, SchemaVariant, sections_touched


@dataclass(frozen=True)
class SimulationTemplate:
    key: str
    label: str
    values: dict[str, str] = field(default_factory=dict)

    @property
    def sections(self) -> list[str]:
        return sections_touched(self.values, SchemaVariant.MINING)


_TEMPLATES: tuple[SimulationTemplate, ...] = (
    SimulationTemplate(
        "chalcopyrite-acidic",
        "Chalcopyrite Leaching - Acidic",
        {
            "mineralType": "chalcopyrite",
            "goal": "recovery",
            "pH": "1.5",
            "eh": "550",
            "temperature": "75",
            "residenceTime": "24",
            "pulpDensity": "20",
            "acidConcentration": "50",
            "fe3Concentration": "3.5",
            "fe2Concentration": "1.2",
            "oxidantDosage": "0.5",
            "chalcopyritePercent": "45",
            "pyritePercent": "25",
            "particleSize": "150",
            "atmosphere": "oxidizing",
            "oxygenFlowRate": "0.5",
        },
    ),
    SimulationTemplate(
        "chalcopyrite-ferric",
        "Chalcopyrite Leaching - Ferric (Fe3+ Oxidative)",
        {
            "mineralType": "chalcopyrite",
            "goal": "recovery",
            "pH": "1.8",
            "eh": "580",
            "temperature": "85",
            "residenceTime": "36",
            "pulpDensity": "25",
            "acidConcentration": "40",
            "fe3Concentration": "5.0",
            "fe2Concentration": "0.8",
            "chalcopyritePercent": "50",
            "pyritePercent": "20",
            "particleSize": "120",
            "redoxControl": "Fe3+/Fe2+ ratio maintained at 6.25",
            "atmosphere": "oxidizing",
        },
    ),
    SimulationTemplate(
        "hvp-liberation",
        "HVP Liberation",
        {
            "goal": "liberation",
            "mineralType": "chalcopyrite",
            "voltage": "15",
            "pulseFrequency": "100",
            "pulseEnergy": "2.5",
            "specificEnergy": "5.0",
            "particleSize": "200",
            "grainSize": "50",
            "fragmentationModel": "Weibull distribution",
            "chalcopyritePercent": "40",
            "particleLiberationIndex": "0.75",
        },
    ),
    SimulationTemplate(
        "hvp-pretreatment-leach",
        "HVP Pre-Treatment + Leach",
        {
            "mineralType": "chalcopyrite",
            "goal": "recovery",
            "voltage": "18",
            "pulseFrequency": "120",
            "pulseEnergy": "3.0",
            "specificEnergy": "6.5",
            "pH": "1.6",
            "temperature": "70",
            "residenceTime": "18",
            "pulpDensity": "22",
            "acidConcentration": "45",
            "fe3Concentration": "3.0",
            "chalcopyritePercent": "42",
            "particleSize": "180",
            "particleLiberation": "90",
            "fragmentationModel": "Log-normal distribution",
            "atmosphere": "oxidizing",
        },
    ),
    SimulationTemplate(
        "heap-leach-copper",
        "Heap Leach (Copper)",
        {
            "mineralType": "chalcopyrite",
            "goal": "recovery",
            "pH": "2.0",
            "temperature": "25",
            "residenceTime": "720",
            "acidConcentration": "30",
            "chalcopyritePercent": "35",
            "pyritePercent": "15",
            "particleSize": "12.5",
            "solidToLiquidRatio": "0.3",
            "atmosphere": "oxidizing",
            "oxygenFlowRate": "0.2",
            "reagentSchedule": "Acid: 30 g/L initial, continuous addition at 0.5 g/L/day",
        },
    ),
    SimulationTemplate(
        "flotation-optimization",
        "Flotation Response Simulation",
        {
            "mineralType": "mixed-sulfides",
            "goal": "grade",
            "pH": "9.5",
            "temperature": "25",
            "pulpDensity": "30",
            "particleSize": "75",
            "chalcopyritePercent": "35",
            "pyritePercent": "30",
            "bornitePercent": "15",
            "particleLiberation": "85",
            "reagentSchedule": "Collector: Xanthate 50 g/t, Frother: MIBC 20 g/t, pH modifier: Lime",
        },
    ),
    SimulationTemplate(
        "ore-sorting",
        "Ore Sorting & Mineral Upgrading",
        {
            "goal": "grade",
            "mineralType": "chalcopyrite",
            "chalcopyritePercent": "38",
            "pyritePercent": "22",
            "particleSize": "50",
            "particleLiberation": "80",
            "grainSize": "30",
            "particleLiberationIndex": "0.80",
        },
    ),
    SimulationTemplate(
        "grain-size-reduction",
        "Grain Size Reduction",
        {
            "goal": "liberation",
            "mineralType": "chalcopyrite",
            "particleSize": "300",
            "grainSize": "80",
            "chalcopyritePercent": "40",
            "pyritePercent": "25",
            "particleLiberation": "60",
            "particleLiberationIndex": "0.60",
            "specificEnergy": "12",
            "fragmentationModel": "Bond work index model",
        },
    ),
    SimulationTemplate("custom-process", "Custom Process (Manual Inputs)"),
)

TEMPLATES: dict[str, SimulationTemplate] = {t.key: t for t in _TEMPLATES}


def list_templates() -> list[SimulationTemplate]:
    return list(_TEMPLATES)


def apply_template(key: str) -> dict[str, str]:
    """Return a complete mining form record pre-filled from template ``key``.

    Every mining field (and ``title``) starts empty, then the preset values are
    applied and ``template`` is set to the key.

    Raises:
        KeyError: If no template has this key.
    """

    template = TEMPLATES[key]
    record = {"title": ""}
    record.update({name: "" for name in MINING_FIELDS})
    record.update(template.values)
    record["template"] = key
    return record
