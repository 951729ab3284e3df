from flask_cors import CORS

from quotecatalog.integrations.cafe24 import Cafe24Client

# Singletons (initialized in app factory)
cors = CORS()
cafe24 = Cafe24Client()
