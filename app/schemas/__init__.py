# Schemas package (re-export feature modules for stable imports)
from .auth.auth import *
from .admin.admin import *
from .blog.blog import *
from .media.media import *
from .common.common import *
