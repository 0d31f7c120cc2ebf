from .dashboard import *
from .inventory import *
from .maintenance import *
from .users import *
from .vehicles import *
from .alerts import *
