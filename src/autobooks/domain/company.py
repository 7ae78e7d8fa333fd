"""Company and fiscal period domain service."""

from typing import Optional
from datetime import date
from autobooks.database.base import Database
from autobooks.domain.entities import Company as CompanyEntity, FiscalPeriod as FiscalPeriodEntity
from autobooks.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    company_not_found,
)


class CompanyService:
    """Service for managing companies and their fiscal periods."""

    def __init__(self, db: Database):
        """Initialize company service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_company(self, name: str) -> int:
        """Create a new company.

        Args:
            name: Company name

        Returns:
            Company ID

        Raises:
            ValidationError: If the name is blank
            ConflictError: If a company with this name already exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Company name cannot be empty")
        if self.db.get_company_by_name(name) is not None:
            raise ConflictError(f"Company with name '{name}' already exists")
        return self.db.create_company(name=name)

    def get_company(self, company_id: int) -> Optional[CompanyEntity]:
        """Get company by ID."""
        return self.db.get_company(company_id)

    def get_company_by_name(self, name: str) -> Optional[CompanyEntity]:
        """Get company by name."""
        return self.db.get_company_by_name(name)

    def list_companies(self) -> list[CompanyEntity]:
        """List all companies."""
        return self.db.list_companies()

    def create_fiscal_period(
        self, company_id: int, name: str, start_date: date, end_date: date
    ) -> int:
        """Create a fiscal period for a company.

        Args:
            company_id: Company ID
            name: Period name (e.g., "FY2024-2025")
            start_date: First day of the period
            end_date: Last day of the period

        Returns:
            Fiscal period ID

        Raises:
            NotFoundError: If the company doesn't exist
            ValidationError: If the name is blank or the dates are reversed
            ConflictError: If the company already has a period with this name
        """
        if self.db.get_company(company_id) is None:
            raise NotFoundError(company_not_found(company_id))

        name = name.strip()
        if not name:
            raise ValidationError("Fiscal period name cannot be empty")
        if end_date < start_date:
            raise ValidationError(
                f"Fiscal period end date {end_date} is before start date {start_date}"
            )

        for period in self.db.list_fiscal_periods(company_id):
            if period.name == name:
                raise ConflictError(
                    f"Fiscal period '{name}' already exists for company {company_id}"
                )

        return self.db.create_fiscal_period(
            company_id=company_id, name=name, start_date=start_date, end_date=end_date
        )

    def get_fiscal_period(self, fiscal_period_id: int) -> Optional[FiscalPeriodEntity]:
        """Get fiscal period by ID."""
        return self.db.get_fiscal_period(fiscal_period_id)

    def list_fiscal_periods(self, company_id: int) -> list[FiscalPeriodEntity]:
        """List a company's fiscal periods ordered by start date."""
        return self.db.list_fiscal_periods(company_id)

    def find_fiscal_period(self, company_id: int, period: str | int) -> FiscalPeriodEntity:
        """Find a company's fiscal period by ID or name.

        Raises:
            NotFoundError: If no such period exists for the company
        """
        periods = self.db.list_fiscal_periods(company_id)
        if isinstance(period, int) or str(period).isdigit():
            period_id = int(period)
            for fp in periods:
                if fp.id == period_id:
                    return fp
        for fp in periods:
            if fp.name == period:
                return fp
        raise NotFoundError(f"Fiscal period '{period}' not found for company {company_id}")
