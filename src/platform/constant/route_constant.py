API_PREFIX = '/api'

# Booking (customer)
BOOKING_BASE = f'{API_PREFIX}/bookings'
BOOKING_CREATE = BOOKING_BASE
BOOKING_MY_ORDERS = f'{BOOKING_BASE}/my-orders'
BOOKING_GET = f'{BOOKING_BASE}/{{booking_id}}'
BOOKING_PAYMENT_CONFIRM = f'{BOOKING_BASE}/{{booking_id}}/payment-confirm'
BOOKING_STREAM = f'{BOOKING_BASE}/{{booking_id}}/stream'

# Vendor orders
VENDOR_ORDER_BASE = f'{API_PREFIX}/vendor/orders'
VENDOR_ORDER_LIST = VENDOR_ORDER_BASE
VENDOR_ORDER_ACTIVE = f'{VENDOR_ORDER_BASE}/active'
VENDOR_ORDER_RESPOND = f'{VENDOR_ORDER_BASE}/{{booking_id}}/respond'
VENDOR_ORDER_STATUS = f'{VENDOR_ORDER_BASE}/{{booking_id}}/status'
