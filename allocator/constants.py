WEIGHT_SCALE = 100

SUSD_POOL = 'susd'
Y_POOL = 'y'
POOL_NAMES = [SUSD_POOL, Y_POOL]

ALLOCATOR_NAME = 'allocator'
ALLOCATOR_ADDRESS = 'allocator'
DEFAULT_OWNER = 'owner'
DEFAULT_WEIGHTS = (50, 50)
