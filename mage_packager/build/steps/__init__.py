"""打包步骤"""
