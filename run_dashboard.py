"""
Quick launcher for the Streamlit composer
"""
import subprocess
import sys
import os


def main():
    """Launch the Streamlit composer"""
    # Ensure we're in the right directory
    script_dir = os.path.dirname(os.path.abspath(__file__))
    os.chdir(script_dir)

    print("Starting Streamlit composer...")
    print("Composer will open in your browser at http://localhost:8501")
    subprocess.run([sys.executable, "-m", "streamlit", "run", "streamlit_app.py"])


if __name__ == "__main__":
    main()
