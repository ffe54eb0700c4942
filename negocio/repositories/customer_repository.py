"""
Customer Repository - Data Access Layer
"""
from negocio.models.customer import Customer
from negocio.repositories.base import TableRepository


class CustomerRepository(TableRepository[Customer]):
    """Record store access for the customers table"""

    model = Customer
