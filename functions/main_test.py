# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================
# Standard library imports
import os
import unittest
from unittest.mock import ANY, patch

# Local application imports
import main
from backend.config import get_settings


class TestMainServer(unittest.TestCase):

    def setUp(self):
        get_settings.cache_clear()

    def tearDown(self):
        get_settings.cache_clear()

    @patch.dict(os.environ, {"USE_IN_MEMORY_BACKENDS": "true"}, clear=True)
    @patch("main.uvicorn.run")
    def test_main_uses_default_port(self, mock_run):
        main.main()
        mock_run.assert_called_once_with(ANY, host="0.0.0.0", port=5000)

    @patch.dict(
        os.environ, {"USE_IN_MEMORY_BACKENDS": "true", "PORT": "8081"}, clear=True
    )
    @patch("main.uvicorn.run")
    def test_main_reads_port_from_environment(self, mock_run):
        main.main()
        mock_run.assert_called_once_with(ANY, host="0.0.0.0", port=8081)


if __name__ == "__main__":
    unittest.main()
