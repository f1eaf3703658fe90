# -*- coding: utf-8 -*-
"""
CBAM Engine Data Models

Pydantic v2 data models for the CBAM emissions calculation engine.

Input models mirror the records produced by the data-entry form. They are
deliberately forgiving: a form that is only half filled in must still load,
so numeric fields keep unparseable text instead of rejecting it, unknown
keys are ignored, and list fields silently drop entries that are not
records. Both the form's camelCase keys and snake_case keys are accepted.

Models:
    - Enums: GasType, FactorCategory, ValidationSeverity
    - Energy: EnergyFuelRecord
    - Processes: ProcessInput, ProcessOutput, ApplicableElements,
                 MeasurableHeatData, WasteGasesData, ProcessRecord
    - Installation: InstallationEmissionSource, InstallationEmissionData
    - Precursors: PurchasedPrecursor, PurchasedPrecursorsData
    - Overrides: EmissionFactorOverride
    - Identifiers: CompanyInfo, ReportConfig, InstallationDetails
    - Snapshot: CBAMDataSnapshot
    - Results: EmissionsByGasType, SourceEmission, CountryShare,
               ImportedShareByCountry, MaterialShare, ImportedShareByMaterial,
               ImportedMaterialEmbedded, FuelBalanceEntry, ProcessAttribution,
               ResultsSnapshot
    - Validation: ValidationIssue, ValidationReport

Author: GreenLang Platform Team
Status: Production Ready
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Dict, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field

from cbam_engine.coercion import finite_or_zero, safe_bool


def to_camel(name: str) -> str:
    """snake_case -> camelCase, keeping digits lower-case ("n2o_factor" -> "n2oFactor")."""
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


# =============================================================================
# Enumerations
# =============================================================================


class GasType(str, Enum):
    """Greenhouse gas types an emission factor can refer to."""
    CO2 = "CO2"
    CH4 = "CH4"
    N2O = "N2O"
    OTHER_GWP = "OtherGWP"


class FactorCategory(str, Enum):
    """Override table categories, one per aggregator."""
    FUEL = "Fuel"
    PROCESS = "Process"
    EMBEDDED = "Embedded"
    TRANSPORT = "Transport"


class ValidationSeverity(str, Enum):
    """Severity levels for validation findings."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


# =============================================================================
# Lenient field types
# =============================================================================


def _lenient_number(value: Any) -> Optional[Union[float, str]]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            # beyond float range; kept as text so validation reports it
            return "inf"
    if isinstance(value, str):
        return value.strip()
    return None


def _lenient_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _lenient_list(value: Any) -> List[Any]:
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, (Mapping, BaseModel))]


def _lenient_record(value: Any) -> Any:
    if isinstance(value, (Mapping, BaseModel)):
        return value
    return {}


LenientNumber = Annotated[Optional[Union[float, str]], BeforeValidator(_lenient_number)]
LenientText = Annotated[Optional[str], BeforeValidator(_lenient_text)]
LenientBool = Annotated[bool, BeforeValidator(safe_bool)]
FiniteFloat = Annotated[float, AfterValidator(finite_or_zero)]

RecordT = TypeVar("RecordT", bound=BaseModel)


class FormRecord(BaseModel):
    """Base class for form records: camelCase aliases, frozen, extra keys ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


# =============================================================================
# Energy and fuels
# =============================================================================


class EnergyFuelRecord(FormRecord):
    """One fuel or energy carrier consumed by the installation."""

    id: LenientText = Field(None, description="Record identifier")
    fuel_type: LenientText = Field(None, description="Fuel type, e.g. 'Natural Gas'")
    fuel_source: LenientText = Field(None, description="Supplier or source of the fuel")
    use_category: LenientText = Field(None, description="Use category tag for the fuel balance")
    consumption: LenientNumber = Field(None, description="Consumed quantity")
    unit: LenientText = Field(None, description="Unit of consumption (GJ, MWh, TJ)")
    co2_emission_factor: LenientNumber = Field(None, description="CO2 factor per unit")
    ch4_emission_factor: LenientNumber = Field(None, description="CH4 factor per unit")
    n2o_emission_factor: LenientNumber = Field(None, description="N2O factor per unit")
    other_gwp_emission_factor: LenientNumber = Field(None, description="Other GHG factor per unit")
    biomass_share: LenientNumber = Field(None, description="Biomass share (0-100)")
    renewable_share: LenientNumber = Field(None, description="Renewable share (0-100 or 0-1)")
    is_biogenic: LenientBool = Field(False, description="Fuel is of biogenic origin")


# =============================================================================
# Processes
# =============================================================================


class ProcessInput(FormRecord):
    """Material consumed by a production process."""

    id: LenientText = None
    material_name: LenientText = Field(None, description="Material name, key for embedded defaults")
    amount: LenientNumber = Field(None, description="Consumed amount")
    quantity: LenientNumber = Field(None, description="Consumed quantity (legacy field)")
    unit: LenientText = None
    cn_code: LenientText = Field(None, alias="cnCode", description="Combined Nomenclature code")
    origin: LenientText = None
    origin_country: LenientText = None
    country_of_origin: LenientText = None
    embedded_emissions: LenientNumber = Field(None, description="Total embedded emissions (tCO2e)")
    is_imported: LenientBool = False
    transport_distance: LenientNumber = Field(None, description="Transport distance (km)")
    transport_mode: LenientText = Field(None, description="road, rail, sea or air")
    transport_emissions: LenientNumber = Field(None, description="Explicit transport emissions (tCO2e)")


class ProcessOutput(FormRecord):
    """Product leaving a production process."""

    id: LenientText = None
    product_name: LenientText = None
    amount: LenientNumber = None
    quantity: LenientNumber = None
    unit: LenientText = None
    cn_code: LenientText = Field(None, alias="cnCode")
    destination: LenientText = None


class ApplicableElements(FormRecord):
    """Which attribution elements apply to a process."""

    direct_emissions: LenientBool = False
    measurable_heat: LenientBool = False
    waste_gases: LenientBool = False
    indirect_emissions: LenientBool = False


class MeasurableHeatData(FormRecord):
    """Measurable heat balance of a process."""

    quantity: LenientNumber = Field(None, description="Net heat produced")
    imported: LenientNumber = None
    exported: LenientNumber = None
    emission_factor: LenientNumber = None
    emission_factor_unit: LenientText = None
    unit: LenientText = None
    share_to_cbam_goods: LenientNumber = Field(
        None, alias="shareToCBAMGoods", description="Share attributed to CBAM goods (0-100)",
    )


class WasteGasesData(FormRecord):
    """Waste gas balance of a process."""

    quantity: LenientNumber = None
    imported: LenientNumber = None
    exported: LenientNumber = None
    emission_factor: LenientNumber = None
    emission_factor_unit: LenientText = None
    unit: LenientText = None
    reused_share: LenientNumber = Field(None, description="Share reused in the process (0-100)")


class ProcessRecord(FormRecord):
    """A production process together with its inputs and outputs."""

    id: LenientText = None
    process_type: LenientText = Field(None, description="Process type, key for process defaults")
    process_name: LenientText = None
    production_amount: LenientNumber = None
    production_quantity: LenientNumber = None
    unit: LenientText = None
    process_emission_factor: LenientNumber = None
    ch4_emission_factor: LenientNumber = None
    n2o_emission_factor: LenientNumber = None
    other_gwp_emission_factor: LenientNumber = None
    inputs: Annotated[List[ProcessInput], BeforeValidator(_lenient_list)] = Field(default_factory=list)
    outputs: Annotated[List[ProcessOutput], BeforeValidator(_lenient_list)] = Field(default_factory=list)
    applicable_elements: Annotated[ApplicableElements, BeforeValidator(_lenient_record)] = Field(
        default_factory=ApplicableElements,
    )
    measurable_heat_data: Annotated[MeasurableHeatData, BeforeValidator(_lenient_record)] = Field(
        default_factory=MeasurableHeatData,
    )
    waste_gases_data: Annotated[WasteGasesData, BeforeValidator(_lenient_record)] = Field(
        default_factory=WasteGasesData,
    )
    electricity_consumption: LenientNumber = None
    electricity_unit: LenientText = None
    electricity_emission_factor: LenientNumber = None
    electricity_emission_factor_unit: LenientText = None
    electricity_exported_amount: LenientNumber = None
    electricity_exported_unit: LenientText = None
    electricity_exported_emission_factor: LenientNumber = None
    electricity_exported_emission_factor_unit: LenientText = None
    produced_for_market: LenientNumber = None
    market_share_percent: LenientNumber = None
    emissions_data_source: LenientText = Field(None, description="Source of the direct emissions data")
    calculation_method: LenientText = Field(None, description="Monitoring method of the direct emissions")
    electricity_emission_factor_source: LenientText = None


# =============================================================================
# Installation emission sources
# =============================================================================


class InstallationEmissionSource(FormRecord):
    """An installation-level emission source (combustion unit, flare, ...)."""

    emission_source_id: LenientText = None
    emission_source_name: LenientText = None
    emission_source_type: LenientText = None
    fuel_type: LenientText = None
    activity_level: LenientNumber = None
    activity_unit: LenientText = None
    emission_factor: LenientNumber = None
    co2_emissions: LenientNumber = Field(None, description="Explicitly stored CO2 emissions")
    calorific_value: LenientNumber = Field(None, description="Net calorific value per activity unit")
    carbon_content: LenientNumber = Field(None, description="Carbon content per energy unit")
    oxidation_factor: LenientNumber = None
    conversion_factor: LenientNumber = None
    biomass_fraction: LenientNumber = Field(None, description="Biomass fraction (0-100)")
    ch4_emissions: LenientNumber = Field(None, description="CH4 emitted (t CH4)")
    n2o_emissions: LenientNumber = Field(None, description="N2O emitted (t N2O)")


class InstallationEmissionData(FormRecord):
    """Installation-level sources plus the manually entered indirect CO2."""

    emissions: Annotated[List[InstallationEmissionSource], BeforeValidator(_lenient_list)] = Field(
        default_factory=list,
    )
    total_indirect_co2_emissions: LenientNumber = Field(None, alias="totalIndirectCO2Emissions")
    total_direct_co2_emissions: LenientNumber = Field(None, alias="totalDirectCO2Emissions")


# =============================================================================
# Purchased precursors
# =============================================================================


class PurchasedPrecursor(FormRecord):
    """A precursor bought from another installation."""

    id: LenientText = None
    name: LenientText = None
    cn_code: LenientText = Field(None, alias="cnCode")
    total_amount_consumed: LenientNumber = None
    total_amount_unit: LenientText = None
    specific_direct_embedded_emissions: LenientNumber = None
    electricity_consumption: LenientNumber = None
    electricity_unit: LenientText = None
    electricity_emission_factor: LenientNumber = None
    electricity_emission_factor_unit: LenientText = None
    uses_default_values: LenientBool = False
    default_justification: LenientText = None
    origin_country: LenientText = None


class PurchasedPrecursorsData(FormRecord):
    """Container for purchased precursors."""

    precursors: Annotated[List[PurchasedPrecursor], BeforeValidator(_lenient_list)] = Field(
        default_factory=list,
    )


# =============================================================================
# Emission factor overrides
# =============================================================================


class EmissionFactorOverride(FormRecord):
    """User-supplied factor consulted before the built-in defaults."""

    id: LenientText = None
    name: LenientText = Field(None, description="Fuel, process, material or transport mode name")
    category: LenientText = Field(None, description="Fuel, Process, Embedded or Transport")
    gas_type: LenientText = Field(None, description="CO2, CH4, N2O or OtherGWP; empty means CO2")
    value: LenientNumber = None
    unit: LenientText = None
    source: LenientText = None
    applicable_to: LenientText = None
    is_biogenic: LenientBool = False


# =============================================================================
# Identifiers
# =============================================================================


class CompanyInfo(FormRecord):
    """Reporting company."""

    company_name: LenientText = None
    company_address: LenientText = None
    company_contact_person: LenientText = None
    company_email: LenientText = None
    company_vat: LenientText = Field(None, alias="companyVAT")
    company_country: LenientText = None


class ReportConfig(FormRecord):
    """Reporting period and installation identifiers."""

    reporting_period: LenientText = None
    installation_id: LenientText = None
    installation_name: LenientText = None
    installation_country: LenientText = None
    installation_address: LenientText = None


class InstallationDetails(FormRecord):
    """Installation characteristics."""

    installation_type: LenientText = None
    main_activity: LenientText = None
    cn_code: LenientText = Field(None, alias="cnCode")
    production_capacity: LenientNumber = None
    annual_production: LenientNumber = None


# =============================================================================
# Data snapshot
# =============================================================================


class CBAMDataSnapshot(FormRecord):
    """Complete data snapshot handed to the engine by the form."""

    company_info: Annotated[CompanyInfo, BeforeValidator(_lenient_record)] = Field(
        default_factory=CompanyInfo,
    )
    report_config: Annotated[ReportConfig, BeforeValidator(_lenient_record)] = Field(
        default_factory=ReportConfig,
    )
    installation_details: Annotated[InstallationDetails, BeforeValidator(_lenient_record)] = Field(
        default_factory=InstallationDetails,
    )
    emission_installation_data: Annotated[
        InstallationEmissionData, BeforeValidator(_lenient_record)
    ] = Field(default_factory=InstallationEmissionData)
    emission_factors: Annotated[List[EmissionFactorOverride], BeforeValidator(_lenient_list)] = Field(
        default_factory=list,
    )
    energy_fuel_data: Annotated[List[EnergyFuelRecord], BeforeValidator(_lenient_list)] = Field(
        default_factory=list,
    )
    process_production_data: Annotated[List[ProcessRecord], BeforeValidator(_lenient_list)] = Field(
        default_factory=list,
    )
    purchased_precursors: Annotated[PurchasedPrecursorsData, BeforeValidator(_lenient_record)] = Field(
        default_factory=PurchasedPrecursorsData,
    )

    @classmethod
    def coerce(cls, data: Union[CBAMDataSnapshot, Mapping[str, Any], None]) -> CBAMDataSnapshot:
        """Return ``data`` as a snapshot, accepting raw mappings and None."""
        if isinstance(data, cls):
            return data
        if isinstance(data, Mapping):
            return cls.model_validate(dict(data))
        return cls()


def coerce_records(items: Any, model: Type[RecordT]) -> List[RecordT]:
    """Turn a collection of mappings and/or models into a list of ``model``.

    Anything that is not a list is treated as empty, and elements that are
    neither ``model`` instances nor mappings are dropped.
    """
    records: List[RecordT] = []
    for item in _lenient_list(items):
        if isinstance(item, model):
            records.append(item)
        elif isinstance(item, Mapping):
            records.append(model.model_validate(dict(item)))
        else:
            records.append(model.model_validate(item.model_dump(by_alias=True)))
    return records


def coerce_record(item: Any, model: Type[RecordT]) -> RecordT:
    """Single-record counterpart of :func:`coerce_records`."""
    if isinstance(item, model):
        return item
    if isinstance(item, Mapping):
        return model.model_validate(dict(item))
    return model()


# =============================================================================
# Results
# =============================================================================


class ResultModel(BaseModel):
    """Base class for engine output: frozen, camelCase on export."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class EmissionsByGasType(ResultModel):
    """Emissions split by greenhouse gas (tCO2e)."""

    co2: FiniteFloat = 0.0
    ch4: FiniteFloat = 0.0
    n2o: FiniteFloat = 0.0
    other_gwp: FiniteFloat = 0.0
    total: FiniteFloat = 0.0

    def __add__(self, other: EmissionsByGasType) -> EmissionsByGasType:
        return EmissionsByGasType.from_parts(
            co2=self.co2 + other.co2,
            ch4=self.ch4 + other.ch4,
            n2o=self.n2o + other.n2o,
            other_gwp=self.other_gwp + other.other_gwp,
        )

    def scaled(self, factor: float) -> EmissionsByGasType:
        """Return a copy with every gas multiplied by ``factor``."""
        return EmissionsByGasType.from_parts(
            co2=self.co2 * factor,
            ch4=self.ch4 * factor,
            n2o=self.n2o * factor,
            other_gwp=self.other_gwp * factor,
        )

    @classmethod
    def from_parts(
        cls, co2: float = 0.0, ch4: float = 0.0, n2o: float = 0.0, other_gwp: float = 0.0,
    ) -> EmissionsByGasType:
        """Build a breakdown whose ``total`` is the sum of the four gases."""
        return cls(co2=co2, ch4=ch4, n2o=n2o, other_gwp=other_gwp, total=co2 + ch4 + n2o + other_gwp)


class SourceEmission(ResultModel):
    """Emissions of one installation-level source."""

    source_id: str = ""
    source_name: str = ""
    emissions: FiniteFloat = 0.0


class InstallationEmissionsResult(ResultModel):
    """Total and per-source installation emissions."""

    total_emissions: FiniteFloat = 0.0
    emissions_by_source: List[SourceEmission] = Field(default_factory=list)


class CountryShare(ResultModel):
    amount: FiniteFloat = 0.0
    share: FiniteFloat = 0.0


class ImportedShareByCountry(ResultModel):
    """Imported input quantity bucketed by country of origin."""

    total: FiniteFloat = 0.0
    by_country: Dict[str, CountryShare] = Field(default_factory=dict)


class MaterialShare(ResultModel):
    imported: FiniteFloat = 0.0
    total: FiniteFloat = 0.0
    share: FiniteFloat = 0.0


class ImportedShareByMaterial(ResultModel):
    """Imported and total input quantity per material."""

    total: FiniteFloat = 0.0
    by_material: Dict[str, MaterialShare] = Field(default_factory=dict)


class ImportedMaterialEmbedded(ResultModel):
    """Embedded emissions of imported inputs, total and per material."""

    total: FiniteFloat = 0.0
    by_material: Dict[str, FiniteFloat] = Field(default_factory=dict)


class FuelBalanceEntry(ResultModel):
    """Energy consumed in one use category, in TJ."""

    use_category: str
    energy_tj: FiniteFloat = 0.0
    record_count: int = 0


class ProcessAttribution(ResultModel):
    """Emissions attributed to a single production process."""

    process_id: str = ""
    process_name: str = ""
    production: FiniteFloat = 0.0
    direct_emissions: FiniteFloat = 0.0
    measurable_heat_emissions: FiniteFloat = 0.0
    waste_gas_emissions: FiniteFloat = 0.0
    indirect_emissions: FiniteFloat = 0.0
    electricity_export_credit: FiniteFloat = 0.0
    net_attributed_emissions: FiniteFloat = 0.0
    specific_embedded_emissions: FiniteFloat = 0.0
    uncertainty_percentage: FiniteFloat = 0.0
    confidence_interval: List[FiniteFloat] = Field(
        default_factory=list, description="[lower, upper] bounds of the net attributed emissions",
    )


class ResultsSnapshot(ResultModel):
    """Complete output of one engine run. All values in tCO2e unless noted."""

    total_direct_co2_emissions: FiniteFloat = Field(0.0, alias="totalDirectCO2Emissions")
    direct_emissions_by_gas_type: EmissionsByGasType = Field(default_factory=EmissionsByGasType)
    biogenic_co2_emissions: FiniteFloat = Field(0.0, alias="biogenicCO2Emissions")
    total_process_emissions: FiniteFloat = 0.0
    process_indirect_emissions: FiniteFloat = 0.0
    process_emissions_by_gas_type: EmissionsByGasType = Field(default_factory=EmissionsByGasType)
    installation_emissions: FiniteFloat = 0.0
    installation_emissions_by_source: List[SourceEmission] = Field(default_factory=list)
    installation_indirect_co2_emissions: FiniteFloat = Field(0.0, alias="installationIndirectCO2Emissions")
    total_emissions: FiniteFloat = 0.0
    total_production: FiniteFloat = 0.0
    specific_emissions: FiniteFloat = 0.0
    total_energy: FiniteFloat = 0.0
    renewable_share: FiniteFloat = 0.0
    imported_raw_material_share: FiniteFloat = 0.0
    imported_raw_material_share_by_country: ImportedShareByCountry = Field(
        default_factory=ImportedShareByCountry,
    )
    imported_raw_material_share_by_material: ImportedShareByMaterial = Field(
        default_factory=ImportedShareByMaterial,
    )
    embedded_emissions: FiniteFloat = 0.0
    embedded_emissions_by_gas_type: EmissionsByGasType = Field(default_factory=EmissionsByGasType)
    purchased_precursors_embedded_emissions: FiniteFloat = 0.0
    total_embedded_emissions: FiniteFloat = 0.0
    imported_material_embedded_emissions: ImportedMaterialEmbedded = Field(
        default_factory=ImportedMaterialEmbedded,
    )
    transport_emissions: FiniteFloat = 0.0
    cumulative_emissions: FiniteFloat = 0.0
    total_emissions_by_gas_type: EmissionsByGasType = Field(default_factory=EmissionsByGasType)
    cbam_reportable_emissions: FiniteFloat = Field(0.0, alias="cbamReportableEmissions")
    cbam_reportable_emissions_by_gas_type: EmissionsByGasType = Field(default_factory=EmissionsByGasType)
    net_co2_emissions: FiniteFloat = Field(0.0, alias="netCO2Emissions")
    net_co2_emissions_reportable: FiniteFloat = Field(0.0, alias="netCO2EmissionsReportable")
    emission_intensity: FiniteFloat = 0.0
    cbam_reportable_emission_intensity: FiniteFloat = Field(0.0, alias="cbamReportableEmissionIntensity")
    fuel_balance: List[FuelBalanceEntry] = Field(default_factory=list)
    process_attributions: List[ProcessAttribution] = Field(default_factory=list)
    provenance_hash: str = ""

    def to_export_dict(self) -> Dict[str, Any]:
        """Serialize with the camelCase keys exporters expect."""
        return self.model_dump(by_alias=True, mode="json")


# =============================================================================
# Validation
# =============================================================================


class ValidationIssue(BaseModel):
    """A single validation finding."""

    model_config = ConfigDict(frozen=True)

    field: str = Field(..., description="Dotted path of the offending field")
    message: str = Field(..., description="Human readable description")
    severity: ValidationSeverity = Field(default=ValidationSeverity.ERROR)


class ValidationReport(BaseModel):
    """Result of validating a data snapshot or a results snapshot."""

    is_valid: bool = Field(default=True)
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    info: List[str] = Field(default_factory=list)
    issues: List[ValidationIssue] = Field(default_factory=list)
    summary: Dict[str, int] = Field(default_factory=dict)


__all__ = [
    "GasType",
    "FactorCategory",
    "ValidationSeverity",
    "LenientNumber",
    "LenientText",
    "LenientBool",
    "FiniteFloat",
    "FormRecord",
    "EnergyFuelRecord",
    "ProcessInput",
    "ProcessOutput",
    "ApplicableElements",
    "MeasurableHeatData",
    "WasteGasesData",
    "ProcessRecord",
    "InstallationEmissionSource",
    "InstallationEmissionData",
    "PurchasedPrecursor",
    "PurchasedPrecursorsData",
    "EmissionFactorOverride",
    "CompanyInfo",
    "ReportConfig",
    "InstallationDetails",
    "CBAMDataSnapshot",
    "coerce_records",
    "coerce_record",
    "ResultModel",
    "EmissionsByGasType",
    "SourceEmission",
    "InstallationEmissionsResult",
    "CountryShare",
    "ImportedShareByCountry",
    "MaterialShare",
    "ImportedShareByMaterial",
    "ImportedMaterialEmbedded",
    "FuelBalanceEntry",
    "ProcessAttribution",
    "ResultsSnapshot",
    "ValidationIssue",
    "ValidationReport",
]
