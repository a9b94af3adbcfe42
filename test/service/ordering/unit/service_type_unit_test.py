import pytest

from src.platform.exception.exceptions import ValidationError
from src.service.ordering.domain.enum.service_type import (
    ServiceGroup,
    ServiceType,
    normalize_service_type,
    require_service_type,
    service_group_of,
)


pytestmark = pytest.mark.unit


class TestNormalizeServiceType:
    @pytest.mark.parametrize(
        'raw, expected',
        [
            ('Delivery', ServiceType.DELIVERY),
            ('  delivery ', ServiceType.DELIVERY),
            ('dine-in', ServiceType.DINE_IN),
            ('DINE_IN', ServiceType.DINE_IN),
            ('take away', ServiceType.TAKEAWAY),
            ('TakeAway', ServiceType.TAKEAWAY),
            ('pick-up', ServiceType.PICKUP),
            ('Car Dine-in', ServiceType.CAR_DINE_IN),
            ('car  dine   in', ServiceType.CAR_DINE_IN),
        ],
    )
    def test_loose_spellings_map_to_canonical(self, raw, expected):
        assert normalize_service_type(raw) == expected

    @pytest.mark.parametrize('raw', ['', '   ', 'drive-thru', None, 42])
    def test_unknown_values_are_not_guessed(self, raw):
        assert normalize_service_type(raw) is None

    def test_canonical_value_passes_through(self):
        assert normalize_service_type(ServiceType.PICKUP) is ServiceType.PICKUP


class TestRequireServiceType:
    def test_unknown_value_raises_with_allowed_list(self):
        with pytest.raises(ValidationError) as exc_info:
            require_service_type('catering')

        assert 'Invalid serviceType' in exc_info.value.message
        assert 'Car Dine in' in exc_info.value.message
        assert exc_info.value.status_code == 400
        assert exc_info.value.errors[0]['field'] == 'serviceType'

    def test_unrecognized_value_never_defaults_to_delivery(self):
        with pytest.raises(ValidationError):
            require_service_type('deliveryy')


class TestServiceGroups:
    @pytest.mark.parametrize(
        'service_type, group',
        [
            (ServiceType.DELIVERY, ServiceGroup.DELIVERY),
            (ServiceType.TAKEAWAY, ServiceGroup.TAKEAWAY),
            (ServiceType.PICKUP, ServiceGroup.TAKEAWAY),
            (ServiceType.DINE_IN, ServiceGroup.DINEIN),
            (ServiceType.CAR_DINE_IN, ServiceGroup.DINEIN),
        ],
    )
    def test_every_type_has_exactly_one_group(self, service_type, group):
        assert service_group_of(service_type) == group
